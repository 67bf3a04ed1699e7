"""
Sorting Logic

Sort options and functions for ranking analyzed videos.
"""

from typing import Iterable, List

from channel_analyzer.models import ScoredVideo


class SortOption:
    """Sort options for video results (values are ScoredVideo attributes)."""
    COMMENTS_PER_DAY = "comments_per_day"
    COMMENTS_PER_VIEW = "comments_per_view"
    LIKES_PER_VIEW = "likes_per_view"
    ENGAGEMENT_RATE = "engagement_rate"
    VIEWS = "views"
    HIDDEN_GEM = "hidden_gem_score"
    VIRAL = "viral_score"
    VELOCITY = "velocity_score"


SORT_OPTIONS = {
    "Comments Per Day": SortOption.COMMENTS_PER_DAY,
    "Comments Per View": SortOption.COMMENTS_PER_VIEW,
    "Likes Per View": SortOption.LIKES_PER_VIEW,
    "Engagement Rate": SortOption.ENGAGEMENT_RATE,
    "Views": SortOption.VIEWS,
    "Hidden Gems": SortOption.HIDDEN_GEM,
    "Viral Score": SortOption.VIRAL,
    "Velocity Score": SortOption.VELOCITY,
}


def sort_videos(videos: Iterable[ScoredVideo], sort_by: str) -> List[ScoredVideo]:
    """
    Sort videos by a metric, highest first.

    Ties keep their original relative order.

    Args:
        videos: Scored videos
        sort_by: One of SortOption values

    Returns:
        New list of videos in descending metric order

    Raises:
        ValueError: If sort_by is not a SortOption value
    """
    if sort_by not in SORT_OPTIONS.values():
        raise ValueError(f"Unknown sort option: {sort_by!r}")

    # sorted(reverse=True) keeps ties in original order
    return sorted(videos, key=lambda v: getattr(v, sort_by), reverse=True)
