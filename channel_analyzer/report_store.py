"""
Saved Report Loading

Load a previously exported JSON report so it can be viewed, sorted and
re-exported without fetching the channel again. Stored metric values are
trusted as-is; nothing is recalculated.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from channel_analyzer.errors import ReportFormatError
from channel_analyzer.models import AnalysisReport, ChannelAverages, ChannelSummary, ScoredVideo
from channel_analyzer.youtube_api import parse_published_at

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ('videos', 'channelInfo', 'channelAverages')


def _parse_timestamp(value) -> Optional[datetime]:
    # Older exports store epoch milliseconds
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        parsed = parse_published_at(value)
        if parsed is None:
            raise ValueError(f"Invalid timestamp: {value!r}")
        return parsed
    raise ValueError(f"Invalid timestamp: {value!r}")


def _title(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Invalid title: {value!r}")
    return value


def video_from_dict(data: Dict) -> ScoredVideo:
    """
    Rebuild a scored video from its JSON form.

    Raises:
        KeyError, TypeError, ValueError: If a field is missing or malformed
    """
    published_at = parse_published_at(data['publishedAt'])
    if published_at is None:
        raise ValueError(f"Invalid publish date: {data['publishedAt']!r}")

    return ScoredVideo(
        video_id=str(data['id']),
        title=_title(data['title']),
        published_at=published_at,
        duration_seconds=int(data.get('durationSeconds', 0)),
        views=int(data['views']),
        likes=int(data['likes']),
        comments=int(data['comments']),
        age_days=int(data['daysAgo']),
        comments_per_day=float(data['cpd']),
        comments_per_view=float(data['cpv']),
        likes_per_view=float(data['lpv']),
        engagement_rate=float(data['engagementRate']),
        comments_per_day_ratio=float(data['cpdRatio']),
        views_ratio=float(data['viewsRatio']),
        engagement_ratio=float(data['engagementRatio']),
        hidden_gem_score=float(data['hiddenGemScore']),
        viral_score=float(data['viralScore']),
        velocity_score=float(data['velocityScore']),
    )


def report_from_dict(data: Dict) -> AnalysisReport:
    """
    Rebuild a report from its JSON-ready dict.

    Args:
        data: Dict as produced by export.report_to_dict

    Returns:
        AnalysisReport

    Raises:
        ReportFormatError: If a mandatory field is missing or malformed
    """
    if not isinstance(data, dict) or not all(data.get(key) is not None for key in REQUIRED_KEYS):
        raise ReportFormatError()

    try:
        channel_info = data['channelInfo']
        averages = data['channelAverages']
        # Older exports name the dropped-video count filteredCount
        filtered_out_count = data.get('filteredOutCount', data.get('filteredCount'))

        return AnalysisReport(
            videos=tuple(video_from_dict(v) for v in data['videos']),
            channel=ChannelSummary(
                title=_title(channel_info['title']),
                subscriber_count=int(channel_info['subscribers']),
                total_video_count=int(channel_info['totalVideos']),
            ),
            averages=ChannelAverages(
                avg_comments_per_day=float(averages['avgCpd']),
                avg_views=float(averages['avgViews']),
                avg_engagement_rate=float(averages['avgEngagement']),
            ),
            fetched_count=int(data.get('fetchedCount') or 0),
            filtered_out_count=int(filtered_out_count or 0),
            created_at=_parse_timestamp(data.get('timestamp')),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Invalid report data: {e}")
        raise ReportFormatError() from e


def load_report(serialized: Union[str, bytes]) -> AnalysisReport:
    """
    Load a report from its JSON text.

    Args:
        serialized: JSON text as written by export.report_to_json

    Returns:
        AnalysisReport

    Raises:
        ReportFormatError: If the text is not valid JSON or not a report
    """
    try:
        data = json.loads(serialized)
    except (ValueError, TypeError) as e:
        logger.warning(f"Could not parse report: {e}")
        raise ReportFormatError("Failed to load data. The file may be corrupted.") from e

    report = report_from_dict(data)
    logger.info(f"Loaded report for '{report.channel.title}' with {len(report.videos)} videos")
    return report


def load_report_file(input_file: str) -> AnalysisReport:
    """
    Load a report from a JSON file.

    Args:
        input_file: Path to a JSON report

    Returns:
        AnalysisReport
    """
    with open(input_file, 'r', encoding='utf-8') as f:
        return load_report(f.read())
