"""
Report Assembly and Export

Functions for assembling an AnalysisReport and exporting it as a JSON
report (loadable again with report_store) or as a CSV table.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Sequence

import pandas as pd

from channel_analyzer.models import AnalysisReport, ChannelAverages, ChannelSummary, ScoredVideo

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    'Title', 'Views', 'Likes', 'Comments', 'CPD', 'CPV', 'LPV',
    'Engagement Rate', 'Days Ago', 'Published', 'URL',
]


def build_report(
    videos: Sequence[ScoredVideo],
    channel: ChannelSummary,
    averages: ChannelAverages,
    fetched_count: int = 0,
    filtered_out_count: int = 0,
    created_at: Optional[datetime] = None,
) -> AnalysisReport:
    """
    Assemble the full analysis report.

    Args:
        videos: Scored videos (the same set the averages were computed on)
        channel: Channel summary
        averages: Channel averages
        fetched_count: Number of videos fetched before filtering
        filtered_out_count: Number of videos dropped by the length filter
        created_at: Report creation time (defaults to now, UTC)

    Returns:
        AnalysisReport
    """
    return AnalysisReport(
        videos=tuple(videos),
        channel=channel,
        averages=averages,
        fetched_count=fetched_count,
        filtered_out_count=filtered_out_count,
        created_at=created_at or datetime.now(timezone.utc),
    )


# ============================================================================
# JSON REPORT
# ============================================================================

def video_to_dict(video: ScoredVideo) -> Dict:
    """Serialize a scored video using the report's JSON keys."""
    return {
        'id': video.video_id,
        'title': video.title,
        'publishedAt': video.published_at.isoformat(),
        'durationSeconds': video.duration_seconds,
        'daysAgo': video.age_days,
        'views': video.views,
        'likes': video.likes,
        'comments': video.comments,
        'cpd': video.comments_per_day,
        'cpv': video.comments_per_view,
        'lpv': video.likes_per_view,
        'engagementRate': video.engagement_rate,
        'cpdRatio': video.comments_per_day_ratio,
        'viewsRatio': video.views_ratio,
        'engagementRatio': video.engagement_ratio,
        'hiddenGemScore': video.hidden_gem_score,
        'viralScore': video.viral_score,
        'velocityScore': video.velocity_score,
    }


def report_to_dict(report: AnalysisReport) -> Dict:
    """
    Convert a report to its JSON-ready dict.

    Args:
        report: AnalysisReport

    Returns:
        Dict with videos, channelInfo, channelAverages, fetchedCount,
        filteredOutCount and timestamp keys
    """
    return {
        'videos': [video_to_dict(v) for v in report.videos],
        'channelInfo': {
            'title': report.channel.title,
            'subscribers': report.channel.subscriber_count,
            'totalVideos': report.channel.total_video_count,
        },
        'channelAverages': {
            'avgCpd': report.averages.avg_comments_per_day,
            'avgViews': report.averages.avg_views,
            'avgEngagement': report.averages.avg_engagement_rate,
        },
        'fetchedCount': report.fetched_count,
        'filteredOutCount': report.filtered_out_count,
        'timestamp': report.created_at.isoformat() if report.created_at else None,
    }


def report_to_json(report: AnalysisReport) -> str:
    """Serialize a report to an indented JSON string."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


# ============================================================================
# CSV TABLE
# ============================================================================

def report_to_csv(videos: Iterable[ScoredVideo]) -> str:
    """
    Render videos as a CSV table, one row per video in the given order.

    Columns: Title, Views, Likes, Comments, CPD (4 decimals), CPV, LPV and
    Engagement Rate (6 decimals), Days Ago, Published (YYYY-MM-DD), URL.

    Args:
        videos: Scored videos, usually already sorted

    Returns:
        CSV text with a header row
    """
    rows = [
        [
            v.title,
            v.views,
            v.likes,
            v.comments,
            f"{v.comments_per_day:.4f}",
            f"{v.comments_per_view:.6f}",
            f"{v.likes_per_view:.6f}",
            f"{v.engagement_rate:.6f}",
            v.age_days,
            v.published_at.astimezone(timezone.utc).strftime('%Y-%m-%d'),
            v.url,
        ]
        for v in videos
    ]
    df = pd.DataFrame(rows, columns=CSV_HEADERS)
    return df.to_csv(index=False, lineterminator='\n')


# ============================================================================
# FILES
# ============================================================================

def default_json_filename(report: AnalysisReport) -> str:
    """File name like youtube-analysis-<channel>-20240131.json."""
    title = report.channel.title or 'unknown'
    title = re.sub(r'[\\/:*?"<>|]', '_', title)
    date_str = (report.created_at or datetime.now(timezone.utc)).strftime('%Y%m%d')
    return f"youtube-analysis-{title}-{date_str}.json"


def default_csv_filename(created_at: Optional[datetime] = None) -> str:
    """File name like youtube-analysis-1706702400000.csv."""
    created_at = created_at or datetime.now(timezone.utc)
    return f"youtube-analysis-{int(created_at.timestamp() * 1000)}.csv"


def write_report_json(report: AnalysisReport, output_file: str):
    """
    Write a report to a JSON file.

    Args:
        report: AnalysisReport
        output_file: Output JSON filename
    """
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(report_to_json(report))

    logger.info(f"Report saved to {output_file}")


def write_report_csv(videos: Iterable[ScoredVideo], output_file: str):
    """
    Write videos to a CSV file.

    Args:
        videos: Scored videos, usually already sorted
        output_file: Output CSV filename
    """
    with open(output_file, 'w', encoding='utf-8', newline='') as f:
        f.write(report_to_csv(videos))

    logger.info(f"CSV saved to {output_file}")
