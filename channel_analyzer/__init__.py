"""
Channel Analyzer Service

A service for analyzing the engagement of a YouTube channel's videos.
Provides catalog fetching, metric calculation, ranking, and export/import
of analysis reports.

Usage:
    from channel_analyzer import YouTubeService, analyze_channel, sort_videos, SortOption

    service = YouTubeService(api_key)
    report = analyze_channel(
        service=service,
        channel_input="https://www.youtube.com/@somechannel",
        min_video_length=5,
        max_videos=200,
    )
    ranked = sort_videos(report.videos, SortOption.HIDDEN_GEM)
"""

# Configuration and presets
from channel_analyzer.config import (
    BATCH_SIZE,
    CONFIRMATION_THRESHOLD,
    DEFAULT_MAX_VIDEOS,
    DEFAULT_MIN_VIDEO_LENGTH,
    HIDDEN_GEM_THRESHOLD,
    MAX_LISTING_PAGES,
    MAX_MAX_VIDEOS,
    MIN_MAX_VIDEOS,
    MIN_VIDEO_LENGTH_OPTIONS,
    VIRAL_THRESHOLD,
    needs_confirmation,
    validate_options,
)

# Errors
from channel_analyzer.errors import (
    AnalysisError,
    ChannelNotFoundError,
    ConfirmationDeclined,
    InputError,
    NoVideosError,
    ReportFormatError,
    YouTubeAPIError,
)

# Data models
from channel_analyzer.models import (
    AnalysisReport,
    ChannelAverages,
    ChannelSummary,
    ScoredVideo,
    VideoMetrics,
    VideoRecord,
)

# YouTube API client
from channel_analyzer.youtube_api import YouTubeService

# Channel resolution
from channel_analyzer.channel_resolver import extract_channel_candidate, resolve_channel_id

# Metrics and formatters
from channel_analyzer.metrics import (
    calculate_age_days,
    calculate_channel_averages,
    calculate_video_metrics,
    format_duration,
    get_video_labels,
    is_hidden_gem,
    is_viral,
    parse_iso8601_duration,
    score_video,
    score_videos,
)

# Filtering
from channel_analyzer.filters import cap_videos, filter_videos_by_duration

# Sorting
from channel_analyzer.sorting import SORT_OPTIONS, SortOption, sort_videos

# Report export and loading
from channel_analyzer.export import (
    build_report,
    default_csv_filename,
    default_json_filename,
    report_to_csv,
    report_to_json,
    write_report_csv,
    write_report_json,
)
from channel_analyzer.report_store import load_report, load_report_file

# Analysis pipeline
from channel_analyzer.pipeline import AnalysisState, ChannelAnalysis, analyze_channel, create_service

__all__ = [
    # Config
    "BATCH_SIZE",
    "CONFIRMATION_THRESHOLD",
    "DEFAULT_MAX_VIDEOS",
    "DEFAULT_MIN_VIDEO_LENGTH",
    "HIDDEN_GEM_THRESHOLD",
    "MAX_LISTING_PAGES",
    "MAX_MAX_VIDEOS",
    "MIN_MAX_VIDEOS",
    "MIN_VIDEO_LENGTH_OPTIONS",
    "VIRAL_THRESHOLD",
    "needs_confirmation",
    "validate_options",
    # Errors
    "AnalysisError",
    "ChannelNotFoundError",
    "ConfirmationDeclined",
    "InputError",
    "NoVideosError",
    "ReportFormatError",
    "YouTubeAPIError",
    # Models
    "AnalysisReport",
    "ChannelAverages",
    "ChannelSummary",
    "ScoredVideo",
    "VideoMetrics",
    "VideoRecord",
    # API
    "YouTubeService",
    # Resolution
    "extract_channel_candidate",
    "resolve_channel_id",
    # Metrics
    "calculate_age_days",
    "calculate_channel_averages",
    "calculate_video_metrics",
    "format_duration",
    "get_video_labels",
    "is_hidden_gem",
    "is_viral",
    "parse_iso8601_duration",
    "score_video",
    "score_videos",
    # Filters
    "cap_videos",
    "filter_videos_by_duration",
    # Sorting
    "SORT_OPTIONS",
    "SortOption",
    "sort_videos",
    # Export
    "build_report",
    "default_csv_filename",
    "default_json_filename",
    "report_to_csv",
    "report_to_json",
    "write_report_csv",
    "write_report_json",
    "load_report",
    "load_report_file",
    # Pipeline
    "AnalysisState",
    "ChannelAnalysis",
    "analyze_channel",
    "create_service",
]
