import httplib2
import pytest

from fakes import CHANNEL_ID, NOW, FakeYouTube, make_http_error, make_video_item
from channel_analyzer.errors import (
    ChannelNotFoundError,
    ConfirmationDeclined,
    InputError,
    NoVideosError,
    YouTubeAPIError,
)
from channel_analyzer.pipeline import (
    AnalysisState,
    ChannelAnalysis,
    analyze_channel,
    create_service,
    fetch_upload_ids,
    fetch_video_details,
    max_listing_pages,
)
from channel_analyzer.youtube_api import YouTubeService

UPLOADS = "UU" + "a" * 22


def make_service(fake):
    return YouTubeService("test-key", client=fake, request_delay=0)


def make_channel(count, duration="PT10M"):
    return FakeYouTube(videos=[make_video_item(f"v{i}", days_ago=i + 1, duration=duration) for i in range(count)])


def test_max_listing_pages():
    assert max_listing_pages(1) == 1
    assert max_listing_pages(50) == 1
    assert max_listing_pages(120) == 3
    assert max_listing_pages(9999) == 200


def test_fetch_caps_listing_and_batches():
    fake = make_channel(300)
    service = make_service(fake)

    video_ids = fetch_upload_ids(service, UPLOADS, max_videos=120)
    assert len(fake.calls_to("playlistItems")) == 3
    assert video_ids == [f"v{i}" for i in range(120)]

    videos = fetch_video_details(service, video_ids)
    batch_sizes = [len(kwargs["id"].split(",")) for kwargs in fake.calls_to("videos")]
    assert batch_sizes == [50, 50, 20]
    assert [v.video_id for v in videos] == video_ids


def test_fetch_stops_without_continuation_token():
    fake = make_channel(30)
    video_ids = fetch_upload_ids(make_service(fake), UPLOADS, max_videos=500)
    assert len(video_ids) == 30
    assert len(fake.calls_to("playlistItems")) == 1


def test_fetch_detail_progress():
    fake = make_channel(70)
    messages = []
    fetch_video_details(make_service(fake), [f"v{i}" for i in range(70)], on_progress=messages.append)
    assert messages == ["Fetching video details (50/70)...", "Fetching video details (70/70)..."]


def test_analyze_channel_end_to_end():
    fake = FakeYouTube(videos=[
        make_video_item("long1", days_ago=10, views=1000, likes=90, comments=10, duration="PT20M"),
        make_video_item("short", days_ago=5, views=5000, likes=10, comments=0, duration="PT1M"),
        make_video_item("long2", days_ago=20, views=3000, likes=30, comments=30, duration="PT1H"),
    ])
    messages = []

    report = analyze_channel(make_service(fake), CHANNEL_ID, min_video_length=2, max_videos=500,
                             on_progress=messages.append, now=NOW)

    assert [v.video_id for v in report.videos] == ["long1", "long2"]
    assert report.fetched_count == 3
    assert report.filtered_out_count == 1
    assert report.channel.title == "Test Channel"
    assert report.averages.avg_views == 2000
    assert report.created_at == NOW
    assert "Calculating analytics..." in messages
    assert fake.calls_to("search") == []


def test_report_is_capped_after_filtering():
    fake = make_channel(80)
    report = analyze_channel(make_service(fake), CHANNEL_ID, max_videos=60, now=NOW)
    assert len(report.videos) == 60
    assert report.fetched_count == 60
    assert report.filtered_out_count == 0


def test_analysis_states():
    analysis = ChannelAnalysis(make_service(make_channel(3)), CHANNEL_ID, now=NOW)
    assert analysis.state is AnalysisState.IDLE
    analysis.run()
    assert analysis.state is AnalysisState.DONE
    assert analysis.channel_id == CHANNEL_ID

    with pytest.raises(RuntimeError):
        analysis.run()


def test_missing_channel_input_makes_no_calls():
    fake = make_channel(3)
    with pytest.raises(InputError):
        analyze_channel(make_service(fake), "   ")
    assert fake.calls == []


@pytest.mark.parametrize("min_video_length,max_videos", [(3, 100), (2, 0), (2, 10000)])
def test_invalid_options_make_no_calls(min_video_length, max_videos):
    fake = make_channel(3)
    with pytest.raises(InputError):
        analyze_channel(make_service(fake), CHANNEL_ID, min_video_length=min_video_length, max_videos=max_videos)
    assert fake.calls == []


def test_large_fetch_requires_confirmation():
    fake = make_channel(3)
    with pytest.raises(ConfirmationDeclined):
        analyze_channel(make_service(fake), CHANNEL_ID, max_videos=2001)
    with pytest.raises(ConfirmationDeclined):
        analyze_channel(make_service(fake), CHANNEL_ID, max_videos=2001, confirm=lambda n: False)
    assert fake.calls == []

    asked = []
    report = analyze_channel(make_service(fake), CHANNEL_ID, max_videos=2001,
                             confirm=lambda n: asked.append(n) or True, now=NOW)
    assert asked == [2001]
    assert len(report.videos) == 3


def test_channel_not_found():
    analysis = ChannelAnalysis(make_service(make_channel(3)), "https://www.youtube.com/@nobody")
    with pytest.raises(ChannelNotFoundError, match="Could not find channel"):
        analysis.run()
    assert analysis.state is AnalysisState.FAILED
    assert analysis.channel_id is None


def test_detail_error_aborts_run():
    fake = make_channel(120)
    fake.errors["videos"] = make_http_error("The request cannot be completed because you have exceeded your quota.")
    analysis = ChannelAnalysis(make_service(fake), CHANNEL_ID, now=NOW)

    with pytest.raises(YouTubeAPIError, match="exceeded your quota"):
        analysis.run()
    assert analysis.state is AnalysisState.FAILED
    assert len(fake.calls_to("videos")) == 1


def test_listing_error_aborts_run():
    fake = make_channel(10)
    fake.errors["playlistItems"] = make_http_error("Playlist not found", status=404)
    with pytest.raises(YouTubeAPIError, match="Playlist not found"):
        analyze_channel(make_service(fake), CHANNEL_ID)
    assert fake.calls_to("videos") == []


def test_no_videos_after_filter():
    fake = make_channel(5, duration="PT1M")
    analysis = ChannelAnalysis(make_service(fake), CHANNEL_ID, min_video_length=5, now=NOW)
    with pytest.raises(NoVideosError):
        analysis.run()
    assert analysis.state is AnalysisState.FAILED


def test_create_service_requires_key():
    with pytest.raises(InputError, match="API key"):
        create_service("  ")


def test_network_error_during_listing_aborts_run():
    fake = make_channel(10)
    fake.errors["playlistItems"] = httplib2.ServerNotFoundError("dns")
    analysis = ChannelAnalysis(make_service(fake), CHANNEL_ID, now=NOW)
    with pytest.raises(YouTubeAPIError, match="dns"):
        analysis.run()
    assert analysis.state is AnalysisState.FAILED
    assert fake.calls_to("videos") == []
