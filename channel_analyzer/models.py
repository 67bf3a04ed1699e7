"""
Data Models

Immutable value types passed between the fetch, metric, ranking and
export stages. A finished analysis is a single AnalysisReport.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class ChannelSummary:
    """Channel metadata shown alongside the analysis."""
    title: str
    subscriber_count: int
    total_video_count: int


@dataclass(frozen=True)
class VideoRecord:
    """Raw video details as fetched from the API."""
    video_id: str
    title: str
    published_at: datetime
    duration_seconds: int
    views: int
    likes: int
    comments: int

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"


@dataclass(frozen=True)
class VideoMetrics(VideoRecord):
    """Video with per-video engagement metrics."""
    age_days: int
    comments_per_day: float
    comments_per_view: float
    likes_per_view: float
    engagement_rate: float


@dataclass(frozen=True)
class ChannelAverages:
    """Arithmetic means over the analyzed videos of a channel."""
    avg_comments_per_day: float
    avg_views: float
    avg_engagement_rate: float


@dataclass(frozen=True)
class ScoredVideo(VideoMetrics):
    """Video with metrics relative to the channel averages."""
    comments_per_day_ratio: float
    views_ratio: float
    engagement_ratio: float
    hidden_gem_score: float
    viral_score: float
    velocity_score: float


@dataclass(frozen=True)
class AnalysisReport:
    """Complete result of one channel analysis."""
    videos: Tuple[ScoredVideo, ...]
    channel: ChannelSummary
    averages: ChannelAverages
    fetched_count: int = 0
    filtered_out_count: int = 0
    created_at: Optional[datetime] = None
