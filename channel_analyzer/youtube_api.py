"""
YouTube API Client

Service class for interacting with the YouTube Data API v3.
Handles channel lookup, upload-list paging and video detail retrieval.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from channel_analyzer.config import BATCH_SIZE, REQUEST_DELAY
from channel_analyzer.errors import ChannelNotFoundError, YouTubeAPIError
from channel_analyzer.metrics import parse_iso8601_duration
from channel_analyzer.models import ChannelSummary, VideoRecord

logger = logging.getLogger(__name__)


def parse_published_at(value: str) -> Optional[datetime]:
    """Parse an API timestamp such as 2024-01-31T12:00:00Z. Values without an offset are UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def error_message(error: HttpError) -> str:
    """
    Extract the upstream error message from an HttpError.

    Args:
        error: Error raised by the API client

    Returns:
        The message field of the JSON error envelope, or the HTTP reason
    """
    content = getattr(error, 'content', b'') or b''
    try:
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        data = json.loads(content)
    except (UnicodeDecodeError, ValueError):
        data = None

    if isinstance(data, dict):
        envelope = data.get('error')
        if isinstance(envelope, dict) and envelope.get('message'):
            return envelope['message']

    return getattr(error, 'reason', None) or str(error)


class YouTubeService:
    """Service class for interacting with YouTube Data API v3."""

    def __init__(self, api_key: str, client=None, request_delay: float = REQUEST_DELAY):
        """
        Initialize YouTube API client.

        Args:
            api_key: YouTube Data API v3 key
            client: Prebuilt API resource (built from api_key when omitted)
            request_delay: Pause in seconds after each paged or batched call

        Raises:
            ValueError: If api_key is empty or None
        """
        if not api_key:
            raise ValueError("API key is required")

        self._youtube = client if client is not None else build('youtube', 'v3', developerKey=api_key)
        self._request_delay = request_delay
        logger.info("YouTube service initialized successfully")

    def _execute(self, request) -> Dict:
        """Execute a request, turning error responses and network failures into YouTubeAPIError."""
        try:
            response = request.execute()
        except HttpError as e:
            raise YouTubeAPIError(error_message(e)) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"Network error calling YouTube API: {e}")
            raise YouTubeAPIError(str(e) or "Network error while contacting YouTube") from e

        envelope = response.get('error')
        if envelope:
            message = envelope.get('message') if isinstance(envelope, dict) else str(envelope)
            raise YouTubeAPIError(message or "YouTube API request failed")

        return response

    def _pause(self):
        # Be respectful with API calls
        if self._request_delay:
            time.sleep(self._request_delay)

    def find_channel_id_by_handle(self, handle: str) -> Optional[str]:
        """
        Look up a channel ID by its @handle.

        Args:
            handle: Channel handle, with or without the leading @

        Returns:
            Channel ID, or None if no channel has this handle
        """
        request = self._youtube.channels().list(
            part='id',
            forHandle=handle
        )
        items = self._execute(request).get('items', [])
        if items:
            return items[0]['id']
        return None

    def search_channel_id(self, query: str) -> Optional[str]:
        """
        Search channels by name and return the top result's ID.

        Args:
            query: Free-text channel name

        Returns:
            Channel ID of the first search result, or None
        """
        request = self._youtube.search().list(
            part='snippet',
            type='channel',
            q=query,
            maxResults=1
        )
        items = self._execute(request).get('items', [])
        if items:
            return items[0].get('snippet', {}).get('channelId')
        return None

    def get_channel(self, channel_id: str) -> Tuple[ChannelSummary, str]:
        """
        Fetch channel summary and its uploads playlist ID.

        Args:
            channel_id: Canonical channel ID (UC...)

        Returns:
            Tuple of (ChannelSummary, uploads playlist ID)

        Raises:
            ChannelNotFoundError: If the API returns no channel
            YouTubeAPIError: If the API responds with an error
        """
        request = self._youtube.channels().list(
            part='contentDetails,snippet,statistics',
            id=channel_id
        )
        items = self._execute(request).get('items', [])
        if not items:
            raise ChannelNotFoundError("Channel not found")

        channel = items[0]
        snippet = channel.get('snippet', {})
        statistics = channel.get('statistics', {})
        content_details = channel.get('contentDetails', {})

        summary = ChannelSummary(
            title=snippet.get('title', ''),
            subscriber_count=int(statistics.get('subscriberCount', 0)),
            total_video_count=int(statistics.get('videoCount', 0)),
        )
        uploads_playlist_id = content_details.get('relatedPlaylists', {}).get('uploads', '')

        logger.info(f"Fetched channel '{summary.title}' ({summary.total_video_count} videos)")
        return summary, uploads_playlist_id

    def list_playlist_video_ids(
        self,
        playlist_id: str,
        page_token: Optional[str] = None
    ) -> Tuple[List[str], Optional[str]]:
        """
        Fetch one page of video IDs from a playlist.

        Args:
            playlist_id: Playlist ID (a channel's uploads playlist)
            page_token: Continuation token from the previous page

        Returns:
            Tuple of (video IDs on this page, next page token or None)

        Raises:
            YouTubeAPIError: If the API responds with an error
        """
        request = self._youtube.playlistItems().list(
            part='contentDetails',
            playlistId=playlist_id,
            maxResults=BATCH_SIZE,
            pageToken=page_token
        )
        response = self._execute(request)

        video_ids = [
            item['contentDetails']['videoId']
            for item in response.get('items', [])
            if item.get('contentDetails', {}).get('videoId')
        ]

        self._pause()
        return video_ids, response.get('nextPageToken')

    def get_video_details(self, video_ids: List[str]) -> List[VideoRecord]:
        """
        Fetch snippet, statistics and duration for up to 50 videos.

        Args:
            video_ids: Video IDs (at most BATCH_SIZE)

        Returns:
            VideoRecords in API response order

        Raises:
            ValueError: If more than BATCH_SIZE IDs are given
            YouTubeAPIError: If the API responds with an error
        """
        if not video_ids:
            return []
        if len(video_ids) > BATCH_SIZE:
            raise ValueError(f"At most {BATCH_SIZE} video IDs per request")

        request = self._youtube.videos().list(
            part='snippet,statistics,contentDetails',
            id=','.join(video_ids)
        )
        response = self._execute(request)

        videos = []
        for item in response.get('items', []):
            video = parse_video(item)
            if video is not None:
                videos.append(video)

        self._pause()
        return videos


def parse_video(item: Dict) -> Optional[VideoRecord]:
    """
    Build a VideoRecord from a videos.list item.

    Args:
        item: Raw API item with snippet, statistics and contentDetails

    Returns:
        VideoRecord, or None if the item has no usable publish date
    """
    video_id = item['id']
    snippet = item.get('snippet', {})
    statistics = item.get('statistics', {})

    published_at = parse_published_at(snippet.get('publishedAt', ''))
    if published_at is None:
        logger.warning(f"Skipping video {video_id}: missing publish date")
        return None

    return VideoRecord(
        video_id=video_id,
        title=snippet.get('title', ''),
        published_at=published_at,
        duration_seconds=parse_iso8601_duration(item.get('contentDetails', {}).get('duration', '')),
        views=int(statistics.get('viewCount', 0)),
        likes=int(statistics.get('likeCount', 0)),
        comments=int(statistics.get('commentCount', 0)),
    )
