"""
Analysis Pipeline

High-level orchestration that ties together channel resolution, the
two-stage catalog fetch, filtering and scoring into one analysis run.
"""

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from channel_analyzer.channel_resolver import extract_channel_candidate, resolve_channel_id
from channel_analyzer.config import (
    BATCH_SIZE,
    DEFAULT_MAX_VIDEOS,
    DEFAULT_MIN_VIDEO_LENGTH,
    MAX_LISTING_PAGES,
    require_confirmation,
    validate_options,
)
from channel_analyzer.errors import ChannelNotFoundError, InputError, NoVideosError
from channel_analyzer.export import build_report
from channel_analyzer.filters import cap_videos, filter_videos_by_duration
from channel_analyzer.metrics import score_videos
from channel_analyzer.models import AnalysisReport, ChannelSummary, VideoRecord
from channel_analyzer.youtube_api import YouTubeService

logger = logging.getLogger(__name__)

ProgressCallback = Optional[Callable[[str], None]]


class AnalysisState(Enum):
    """Stages of a single analysis run."""
    IDLE = "idle"
    RESOLVING = "resolving"
    LISTING_IDENTIFIERS = "listing_identifiers"
    FETCHING_DETAILS = "fetching_details"
    FILTERING = "filtering"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


def create_service(api_key: str) -> YouTubeService:
    """
    Create a YouTubeService, reporting a missing key as an input error.

    Raises:
        InputError: If api_key is empty
    """
    if not api_key or not api_key.strip():
        raise InputError("Please enter your YouTube API key")
    return YouTubeService(api_key.strip())


def max_listing_pages(max_videos: int) -> int:
    """Number of upload-list pages needed for max_videos, capped at MAX_LISTING_PAGES."""
    return min(math.ceil(max_videos / BATCH_SIZE), MAX_LISTING_PAGES)


def fetch_upload_ids(
    service: YouTubeService,
    playlist_id: str,
    max_videos: int,
    on_progress: ProgressCallback = None
) -> List[str]:
    """
    Page through a channel's uploads playlist collecting video IDs.

    Stops when there is no next page, when max_videos IDs have been
    collected, or when the page ceiling is reached.

    Args:
        service: YouTubeService instance
        playlist_id: Uploads playlist ID
        max_videos: Maximum number of IDs to return
        on_progress: Callback for progress updates (optional)

    Returns:
        At most max_videos video IDs, newest first
    """
    max_pages = max_listing_pages(max_videos)
    video_ids: List[str] = []
    next_page_token = None
    page_count = 0

    while page_count < max_pages and len(video_ids) < max_videos:
        page_ids, next_page_token = service.list_playlist_video_ids(playlist_id, next_page_token)
        video_ids.extend(page_ids)
        page_count += 1

        if on_progress:
            on_progress(f"Fetching video list ({len(video_ids)} videos)...")

        if not next_page_token:
            break

    logger.info(f"Listed {len(video_ids)} video IDs in {page_count} pages")
    return video_ids[:max_videos]


def fetch_video_details(
    service: YouTubeService,
    video_ids: List[str],
    on_progress: ProgressCallback = None
) -> List[VideoRecord]:
    """
    Fetch video details in batches of BATCH_SIZE, in request order.

    Any batch error aborts the whole fetch.

    Args:
        service: YouTubeService instance
        video_ids: Video IDs to fetch
        on_progress: Callback for progress updates (optional)

    Returns:
        VideoRecords for all batches, concatenated
    """
    videos: List[VideoRecord] = []

    for i in range(0, len(video_ids), BATCH_SIZE):
        batch = video_ids[i:i + BATCH_SIZE]
        if on_progress:
            on_progress(f"Fetching video details ({i + len(batch)}/{len(video_ids)})...")
        videos.extend(service.get_video_details(batch))

    logger.info(f"Fetched details for {len(videos)} of {len(video_ids)} videos")
    return videos


class ChannelAnalysis:
    """
    One analysis run for one channel.

    The run walks IDLE -> RESOLVING -> LISTING_IDENTIFIERS ->
    FETCHING_DETAILS -> FILTERING -> SCORING -> DONE. Any error moves it
    to FAILED and propagates; nothing fetched so far is kept. A run
    cannot be restarted, create a new ChannelAnalysis instead.
    """

    def __init__(
        self,
        service: YouTubeService,
        channel_input: str,
        min_video_length: int = DEFAULT_MIN_VIDEO_LENGTH,
        max_videos: int = DEFAULT_MAX_VIDEOS,
        on_progress: ProgressCallback = None,
        confirm: Optional[Callable[[int], bool]] = None,
        now: Optional[datetime] = None,
    ):
        """
        Args:
            service: YouTubeService instance
            channel_input: Channel URL, ID or handle as typed by the user
            min_video_length: Minimum video length in minutes
            max_videos: Maximum number of videos in the report
            on_progress: Callback for progress updates (optional)
            confirm: Called with max_videos for large fetches; return True to proceed
            now: Analysis time (defaults to the current UTC time)
        """
        self._service = service
        self._channel_input = channel_input
        self._min_video_length = min_video_length
        self._max_videos = max_videos
        self._on_progress = on_progress
        self._confirm = confirm
        self._now = now

        self.state = AnalysisState.IDLE
        self.channel_id: Optional[str] = None
        self.channel: Optional[ChannelSummary] = None

    def _progress(self, msg: str):
        if self._on_progress:
            self._on_progress(msg)

    def _enter(self, state: AnalysisState):
        logger.info(f"Analysis state: {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> AnalysisReport:
        """
        Execute the analysis.

        Returns:
            AnalysisReport for the channel

        Raises:
            InputError: For a missing channel reference or invalid options
            ChannelNotFoundError: When the channel cannot be resolved
            YouTubeAPIError: When any API call fails
            NoVideosError: When no videos survive the length filter
            RuntimeError: If this analysis has already run
        """
        if self.state is not AnalysisState.IDLE:
            raise RuntimeError("This analysis has already run; start a new one")

        try:
            return self._run()
        except Exception:
            self.state = AnalysisState.FAILED
            raise

    def _run(self) -> AnalysisReport:
        if not self._channel_input or not self._channel_input.strip():
            raise InputError("Please enter a channel URL or ID")
        validate_options(self._min_video_length, self._max_videos)
        require_confirmation(self._max_videos, self._confirm)

        # Resolve channel
        self._enter(AnalysisState.RESOLVING)
        self._progress("Resolving channel ID...")
        candidate = extract_channel_candidate(self._channel_input)
        channel_id = resolve_channel_id(self._service, candidate)
        if not channel_id:
            raise ChannelNotFoundError()
        self.channel_id = channel_id

        self._progress("Fetching channel information...")
        self.channel, uploads_playlist_id = self._service.get_channel(channel_id)
        if not uploads_playlist_id:
            raise NoVideosError(f"Channel '{self.channel.title}' has no uploads")

        # Stage 1: list video IDs
        self._enter(AnalysisState.LISTING_IDENTIFIERS)
        self._progress("Fetching video list...")
        video_ids = fetch_upload_ids(self._service, uploads_playlist_id, self._max_videos, self._on_progress)

        # Stage 2: fetch details
        self._enter(AnalysisState.FETCHING_DETAILS)
        self._progress(f"Fetching details for {len(video_ids)} videos...")
        videos = fetch_video_details(self._service, video_ids, self._on_progress)

        # Filter by length, then cap
        self._enter(AnalysisState.FILTERING)
        self._progress(f"Filtering videos (min {self._min_video_length}min length)...")
        kept, filtered_out_count = filter_videos_by_duration(videos, self._min_video_length * 60)
        kept = cap_videos(kept, self._max_videos)
        if not kept:
            raise NoVideosError(
                f"No videos of at least {self._min_video_length} minutes found "
                f"({filtered_out_count} shorter videos excluded)"
            )

        # Score
        self._enter(AnalysisState.SCORING)
        self._progress("Calculating analytics...")
        now = self._now or datetime.now(timezone.utc)
        scored, averages = score_videos(kept, now)

        report = build_report(
            videos=scored,
            channel=self.channel,
            averages=averages,
            fetched_count=len(videos),
            filtered_out_count=filtered_out_count,
            created_at=now,
        )

        self._enter(AnalysisState.DONE)
        self._progress(f"Analyzed {len(scored)} videos")
        return report


def analyze_channel(
    service: YouTubeService,
    channel_input: str,
    min_video_length: int = DEFAULT_MIN_VIDEO_LENGTH,
    max_videos: int = DEFAULT_MAX_VIDEOS,
    on_progress: ProgressCallback = None,
    confirm: Optional[Callable[[int], bool]] = None,
    now: Optional[datetime] = None,
) -> AnalysisReport:
    """
    Execute a full channel analysis.

    Args:
        service: YouTubeService instance
        channel_input: Channel URL, ID or handle
        min_video_length: Minimum video length in minutes
        max_videos: Maximum number of videos in the report
        on_progress: Callback for progress updates (optional)
        confirm: Confirmation callback for fetches above the threshold
        now: Analysis time (optional)

    Returns:
        AnalysisReport for the channel

    Raises:
        AnalysisError: When the analysis fails at any step
    """
    analysis = ChannelAnalysis(
        service=service,
        channel_input=channel_input,
        min_video_length=min_video_length,
        max_videos=max_videos,
        on_progress=on_progress,
        confirm=confirm,
        now=now,
    )
    return analysis.run()
