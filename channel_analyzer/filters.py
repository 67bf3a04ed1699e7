"""
Filtering Functions

Functions to filter fetched videos by length and cap the analyzed set.
"""

from typing import List, Sequence, Tuple

from channel_analyzer.models import VideoRecord


def filter_videos_by_duration(
    videos: Sequence[VideoRecord],
    min_duration_seconds: int
) -> Tuple[List[VideoRecord], int]:
    """
    Filter videos to only those at least min_duration_seconds long.

    Args:
        videos: Fetched video records
        min_duration_seconds: Minimum duration threshold in seconds

    Returns:
        Tuple of (kept videos in original order, number of videos dropped)
    """
    kept = [v for v in videos if v.duration_seconds >= min_duration_seconds]
    return kept, len(videos) - len(kept)


def cap_videos(videos: Sequence[VideoRecord], max_videos: int) -> List[VideoRecord]:
    """Keep at most max_videos, preserving order."""
    return list(videos[:max_videos])
