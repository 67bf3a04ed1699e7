import socket
from datetime import datetime, timezone

import httplib2
import pytest

from fakes import CHANNEL_ID, NOW, UPLOADS_ID, FakeYouTube, make_http_error, make_video_item
from channel_analyzer.errors import ChannelNotFoundError, YouTubeAPIError
from channel_analyzer.youtube_api import YouTubeService, error_message, parse_published_at, parse_video


def make_service(fake):
    return YouTubeService("test-key", client=fake, request_delay=0)


def test_requires_api_key():
    with pytest.raises(ValueError):
        YouTubeService("")


def test_error_message_uses_envelope_message():
    assert error_message(make_http_error("The request cannot be completed because you have exceeded your quota.")) == \
        "The request cannot be completed because you have exceeded your quota."


def test_get_channel():
    fake = FakeYouTube(videos=[make_video_item("a")], title="Creator", subscribers=999)
    summary, uploads = make_service(fake).get_channel(CHANNEL_ID)
    assert summary.title == "Creator"
    assert summary.subscriber_count == 999
    assert summary.total_video_count == 1
    assert uploads == UPLOADS_ID


def test_get_channel_not_found():
    with pytest.raises(ChannelNotFoundError):
        make_service(FakeYouTube()).get_channel("UC" + "b" * 22)


def test_upstream_error_is_surfaced_verbatim():
    fake = FakeYouTube()
    fake.errors["channels"] = make_http_error("API key not valid. Please pass a valid API key.", status=400)
    with pytest.raises(YouTubeAPIError, match="API key not valid. Please pass a valid API key."):
        make_service(fake).get_channel(CHANNEL_ID)


def test_list_playlist_video_ids_pages():
    fake = FakeYouTube(videos=[make_video_item(f"v{i}") for i in range(60)])
    service = make_service(fake)

    ids, token = service.list_playlist_video_ids(UPLOADS_ID)
    assert len(ids) == 50
    assert token == "50"

    ids, token = service.list_playlist_video_ids(UPLOADS_ID, token)
    assert ids == [f"v{i}" for i in range(50, 60)]
    assert token is None


def test_get_video_details():
    fake = FakeYouTube(videos=[make_video_item("a", days_ago=3, views=100, likes=7, comments=2, duration="PT1H2M3S")])
    videos = make_service(fake).get_video_details(["a"])
    assert len(videos) == 1
    video = videos[0]
    assert video.video_id == "a"
    assert video.views == 100
    assert video.likes == 7
    assert video.comments == 2
    assert video.duration_seconds == 3723
    assert (NOW - video.published_at).days == 3
    assert video.url == "https://www.youtube.com/watch?v=a"


def test_get_video_details_rejects_oversized_batch():
    with pytest.raises(ValueError):
        make_service(FakeYouTube()).get_video_details([f"v{i}" for i in range(51)])


def test_parse_video_defaults_missing_statistics():
    item = make_video_item("a")
    item["statistics"] = {"viewCount": "10"}
    del item["contentDetails"]
    video = parse_video(item)
    assert video.likes == 0
    assert video.comments == 0
    assert video.duration_seconds == 0


def test_parse_video_skips_items_without_publish_date():
    item = make_video_item("a")
    item["snippet"]["publishedAt"] = ""
    assert parse_video(item) is None


def test_network_error_becomes_api_error():
    fake = FakeYouTube()
    fake.errors["channels"] = httplib2.ServerNotFoundError("dns")
    with pytest.raises(YouTubeAPIError, match="dns"):
        make_service(fake).get_channel(CHANNEL_ID)


def test_socket_timeout_becomes_api_error():
    fake = FakeYouTube(videos=[make_video_item("a")])
    fake.errors["videos"] = socket.timeout("timed out")
    with pytest.raises(YouTubeAPIError, match="timed out"):
        make_service(fake).get_video_details(["a"])


def test_error_envelope_in_response_body():
    fake = FakeYouTube()
    fake._search = lambda **kwargs: {"error": {"code": 403, "message": "quotaExceeded"}}
    with pytest.raises(YouTubeAPIError, match="quotaExceeded"):
        make_service(fake).search_channel_id("x")


def test_parse_published_at_treats_naive_values_as_utc():
    assert parse_published_at("2025-12-01T23:30:00") == datetime(2025, 12, 1, 23, 30, tzinfo=timezone.utc)
    assert parse_published_at("2025-12-01T23:30:00Z") == datetime(2025, 12, 1, 23, 30, tzinfo=timezone.utc)
    assert parse_published_at("not a date") is None
