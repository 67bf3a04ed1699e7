"""
Metrics Calculations and Formatters

Functions for calculating per-video and channel-relative engagement
metrics, and formatting them for human-readable display.
"""

import math
import re
from dataclasses import fields
from datetime import datetime, timedelta
from typing import Dict, List, Sequence, Tuple

from channel_analyzer.config import HIDDEN_GEM_THRESHOLD, VIRAL_THRESHOLD
from channel_analyzer.models import ChannelAverages, ScoredVideo, VideoMetrics, VideoRecord

_DURATION_PATTERN = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?', re.IGNORECASE)


# ============================================================================
# DURATION PARSING & FORMATTING
# ============================================================================

def parse_iso8601_duration(duration: str) -> int:
    """
    Parse ISO 8601 duration (PT1H23M45S) to seconds.

    Missing components count as zero. Anything that is not a duration
    string parses to 0 instead of raising.

    Args:
        duration: ISO 8601 duration string

    Returns:
        Duration in seconds
    """
    if not duration or not isinstance(duration, str):
        return 0

    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        return 0

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)

    return hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int) -> str:
    """
    Format seconds as H:MM:SS or M:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds <= 0:
        return "0:00"

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


# ============================================================================
# PER-VIDEO METRICS
# ============================================================================

def calculate_age_days(published_at: datetime, now: datetime) -> int:
    """
    Calculate whole days since publication, never less than 1.

    Args:
        published_at: Video publish time
        now: Analysis time

    Returns:
        Age in days (minimum 1)
    """
    return max(1, (now - published_at) // timedelta(days=1))


def calculate_video_metrics(video: VideoRecord, now: datetime) -> VideoMetrics:
    """
    Calculate engagement metrics for a single video.

    Per-view metrics are 0 for videos without views.

    Args:
        video: Raw video record
        now: Analysis time

    Returns:
        VideoMetrics with age, CPD, CPV, LPV and engagement rate
    """
    age_days = calculate_age_days(video.published_at, now)
    views = video.views

    return VideoMetrics(
        **_field_values(video, VideoRecord),
        age_days=age_days,
        comments_per_day=video.comments / age_days,
        comments_per_view=video.comments / views if views > 0 else 0.0,
        likes_per_view=video.likes / views if views > 0 else 0.0,
        engagement_rate=(video.likes + video.comments) / views if views > 0 else 0.0,
    )


# ============================================================================
# CHANNEL AVERAGES
# ============================================================================

def calculate_channel_averages(videos: Sequence[VideoMetrics]) -> ChannelAverages:
    """
    Calculate the channel's average CPD, views and engagement rate.

    Args:
        videos: Videos with per-video metrics

    Returns:
        ChannelAverages over all given videos

    Raises:
        ValueError: If videos is empty (the mean of no videos is undefined)
    """
    if not videos:
        raise ValueError("Cannot average metrics over an empty set of videos")

    count = len(videos)
    return ChannelAverages(
        avg_comments_per_day=sum(v.comments_per_day for v in videos) / count,
        avg_views=sum(v.views for v in videos) / count,
        avg_engagement_rate=sum(v.engagement_rate for v in videos) / count,
    )


# ============================================================================
# RELATIVE SCORES
# ============================================================================

def calculate_ratio(value: float, average: float) -> float:
    """Return value relative to average, or 0 when the average is not positive."""
    return value / average if average > 0 else 0.0


def calculate_velocity_score(engagement_rate: float, age_days: int) -> float:
    """
    Discount engagement rate by the log of the video's age.

    The +2 offset keeps the denominator at or above ln(2).
    """
    return engagement_rate / math.log(age_days + 2)


def score_video(video: VideoMetrics, averages: ChannelAverages) -> ScoredVideo:
    """
    Score a video against its channel's averages.

    Formula:
    - Hidden gem: engagement ratio - views ratio
    - Viral: views ratio * engagement ratio
    - Velocity: engagement rate / ln(age_days + 2)

    Args:
        video: Video with per-video metrics
        averages: Channel averages for the same video set

    Returns:
        ScoredVideo with ratios and composite scores
    """
    comments_per_day_ratio = calculate_ratio(video.comments_per_day, averages.avg_comments_per_day)
    views_ratio = calculate_ratio(video.views, averages.avg_views)
    engagement_ratio = calculate_ratio(video.engagement_rate, averages.avg_engagement_rate)

    return ScoredVideo(
        **_field_values(video, VideoMetrics),
        comments_per_day_ratio=comments_per_day_ratio,
        views_ratio=views_ratio,
        engagement_ratio=engagement_ratio,
        hidden_gem_score=engagement_ratio - views_ratio,
        viral_score=views_ratio * engagement_ratio,
        velocity_score=calculate_velocity_score(video.engagement_rate, video.age_days),
    )


def score_videos(
    videos: Sequence[VideoRecord],
    now: datetime
) -> Tuple[List[ScoredVideo], ChannelAverages]:
    """
    Run the full metric calculation over a filtered video set.

    Args:
        videos: Filtered raw video records (must not be empty)
        now: Analysis time

    Returns:
        Tuple of (scored videos in input order, channel averages)

    Raises:
        ValueError: If videos is empty
    """
    if not videos:
        raise ValueError("Cannot score an empty set of videos")

    with_metrics = [calculate_video_metrics(v, now) for v in videos]
    averages = calculate_channel_averages(with_metrics)
    return [score_video(v, averages) for v in with_metrics], averages


# ============================================================================
# LABELS
# ============================================================================

def is_hidden_gem(video: ScoredVideo) -> bool:
    """Engagement outpaces views relative to the channel."""
    return video.hidden_gem_score > HIDDEN_GEM_THRESHOLD


def is_viral(video: ScoredVideo) -> bool:
    """Both views and engagement well above the channel norm."""
    return video.viral_score > VIRAL_THRESHOLD


def get_video_labels(video: ScoredVideo) -> List[str]:
    """
    Get display labels for a scored video.

    Args:
        video: Scored video

    Returns:
        List of labels, e.g. ["Hidden Gem"] or ["Viral"]
    """
    labels = []
    if is_hidden_gem(video):
        labels.append("Hidden Gem")
    if is_viral(video):
        labels.append("Viral")
    return labels


def _field_values(obj, cls) -> Dict:
    return {f.name: getattr(obj, f.name) for f in fields(cls)}
