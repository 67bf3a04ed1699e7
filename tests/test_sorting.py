from dataclasses import replace
from datetime import timedelta

import pytest

from fakes import NOW
from channel_analyzer.metrics import score_videos
from channel_analyzer.models import VideoRecord
from channel_analyzer.sorting import SORT_OPTIONS, SortOption, sort_videos


def make_scored():
    records = [
        VideoRecord(f"v{i}", f"Video {i}", NOW - timedelta(days=days), 600, views, likes, comments)
        for i, (days, views, likes, comments) in enumerate([
            (10, 1000, 50, 10),
            (30, 5000, 100, 5),
            (2, 200, 30, 8),
            (100, 1000, 50, 10),
        ])
    ]
    scored, _ = score_videos(records, NOW)
    return scored


@pytest.mark.parametrize("sort_by", list(SORT_OPTIONS.values()))
def test_sort_is_descending(sort_by):
    ranked = sort_videos(make_scored(), sort_by)
    values = [getattr(v, sort_by) for v in ranked]
    assert values == sorted(values, reverse=True)


def test_sort_is_stable_for_ties():
    videos = make_scored()
    tied = [replace(v, views=100) for v in videos]
    assert [v.video_id for v in sort_videos(tied, SortOption.VIEWS)] == ["v0", "v1", "v2", "v3"]

    # v0 and v3 have equal views; v0 comes first in the input
    assert [v.video_id for v in sort_videos(videos, SortOption.VIEWS)] == ["v1", "v0", "v3", "v2"]


def test_sort_does_not_modify_input():
    videos = make_scored()
    sort_videos(videos, SortOption.COMMENTS_PER_DAY)
    assert [v.video_id for v in videos] == ["v0", "v1", "v2", "v3"]


def test_unknown_sort_option():
    with pytest.raises(ValueError):
        sort_videos(make_scored(), "dislikes")


def test_sort_options_cover_all_metrics():
    assert set(SORT_OPTIONS.values()) == {
        "comments_per_day", "comments_per_view", "likes_per_view", "engagement_rate",
        "views", "hidden_gem_score", "viral_score", "velocity_score",
    }
