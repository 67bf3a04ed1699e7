#!/usr/bin/env python3
"""
Channel Analyzer - Home Page
Analyze a YouTube channel's videos by comments per day, engagement,
hidden gem, viral and velocity scores.

Installation:
    1. pip install -e .
    2. Create a .env file in the same directory with: YOUTUBE_API_KEY=your_api_key_here
       (or paste the key into the app)
    3. Get your API key from: https://console.cloud.google.com/
    4. Run: streamlit run channel_analyzer/Home.py
"""

from typing import List

import pandas as pd
import streamlit as st

from channel_analyzer.config import (
    CONFIRMATION_THRESHOLD,
    DEFAULT_MAX_VIDEOS,
    MAX_MAX_VIDEOS,
    MIN_MAX_VIDEOS,
    MIN_VIDEO_LENGTH_PRESETS,
    TOP_VIDEOS_DISPLAYED,
    needs_confirmation,
)
from channel_analyzer.errors import AnalysisError, ReportFormatError
from channel_analyzer.export import (
    default_csv_filename,
    default_json_filename,
    report_to_csv,
    report_to_json,
)
from channel_analyzer.metrics import format_duration, get_video_labels
from channel_analyzer.models import AnalysisReport, ScoredVideo
from channel_analyzer.pipeline import analyze_channel
from channel_analyzer.report_store import load_report
from channel_analyzer.shared.state import (
    get_env_api_key,
    get_service,
    init_session_state,
    reset_analysis,
    show_api_error,
)
from channel_analyzer.sorting import SORT_OPTIONS, sort_videos


def process_analysis(service, channel_input: str, min_video_length: int, max_videos: int, confirmed: bool):
    """Run the analysis with UI progress updates."""
    with st.status("Starting analysis...", expanded=True) as status:
        def on_progress(msg: str):
            st.write(msg)

        try:
            report = analyze_channel(
                service=service,
                channel_input=channel_input,
                min_video_length=min_video_length,
                max_videos=max_videos,
                on_progress=on_progress,
                confirm=lambda _: confirmed,
            )
            status.update(label=f"Analyzed {len(report.videos)} videos", state="complete")
            st.session_state.report = report
            st.session_state.min_video_length = min_video_length
            st.session_state.error = ''

        except AnalysisError as e:
            st.session_state.error = str(e) or 'An error occurred while fetching data'
            status.update(label="Analysis failed", state="error")


def render_channel_summary(report: AnalysisReport):
    """Channel info, counts and averages."""
    st.subheader(report.channel.title)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Subscribers", f"{report.channel.subscriber_count:,}")
    with col2:
        st.metric("Total Videos", f"{report.channel.total_video_count:,}")
    with col3:
        st.metric("Analyzed", f"{len(report.videos):,}")
    with col4:
        st.metric("Fetched", f"{report.fetched_count:,}")

    if report.filtered_out_count > 0:
        min_length = st.session_state.get('min_video_length')
        suffix = f" (shorter than {min_length} min)" if min_length else ""
        plural = "s" if report.filtered_out_count != 1 else ""
        st.caption(f"{report.filtered_out_count:,} video{plural} excluded{suffix}")

    col5, col6, col7 = st.columns(3)
    with col5:
        st.metric("Avg Comments/Day", f"{report.averages.avg_comments_per_day:.2f}")
    with col6:
        st.metric("Avg Views", f"{report.averages.avg_views:,.0f}")
    with col7:
        st.metric("Avg Engagement", f"{report.averages.avg_engagement_rate * 100:.3f}%")


def render_video_table(videos: List[ScoredVideo]):
    """Top videos in the selected order."""
    table_data = []
    for rank, v in enumerate(videos[:TOP_VIDEOS_DISPLAYED], start=1):
        table_data.append({
            '#': rank,
            'Title': v.title,
            'Labels': ", ".join(get_video_labels(v)),
            'Views': v.views,
            'Likes': v.likes,
            'Comments': v.comments,
            'CPD': v.comments_per_day,
            'Engagement': v.engagement_rate * 100,
            'Hidden Gem': v.hidden_gem_score,
            'Viral': v.viral_score,
            'Velocity': v.velocity_score,
            'Length': format_duration(v.duration_seconds),
            'Days Ago': v.age_days,
            'URL': v.url,
        })

    df = pd.DataFrame(table_data)

    st.caption(f"Showing top {len(table_data)} of {len(videos)} videos")
    st.dataframe(
        df,
        column_config={
            'Title': st.column_config.TextColumn('Title', width='large'),
            'Views': st.column_config.NumberColumn('Views', format='%d'),
            'CPD': st.column_config.NumberColumn('CPD', format='%.2f'),
            'Engagement': st.column_config.NumberColumn('Engagement', format='%.2f%%'),
            'Hidden Gem': st.column_config.NumberColumn('Hidden Gem', format='%.2f'),
            'Viral': st.column_config.NumberColumn('Viral', format='%.2f'),
            'Velocity': st.column_config.NumberColumn('Velocity', format='%.6f'),
            'URL': st.column_config.LinkColumn('Link', display_text='Watch'),
        },
        hide_index=True,
        width='stretch',
    )


def render_report(report: AnalysisReport):
    """Summary, ranking and export buttons for a report."""
    render_channel_summary(report)
    st.divider()

    sort_label = st.selectbox("Sort by", options=list(SORT_OPTIONS.keys()), index=0)
    sorted_videos = sort_videos(report.videos, SORT_OPTIONS[sort_label])

    col1, col2, _ = st.columns([1, 1, 4])
    with col1:
        st.download_button(
            "Save Data (JSON)",
            data=report_to_json(report),
            file_name=default_json_filename(report),
            mime="application/json",
        )
    with col2:
        st.download_button(
            "Export CSV",
            data=report_to_csv(sorted_videos),
            file_name=default_csv_filename(),
            mime="text/csv",
        )

    render_video_table(sorted_videos)


def main():
    """Home page - channel analysis."""
    st.set_page_config(page_title="Channel Analyzer", page_icon="📈", layout="wide")

    init_session_state()

    st.title("YouTube Channel Analyzer")

    api_key = get_env_api_key() or st.text_input("YouTube API Key", type="password")

    uploaded = st.file_uploader("Load saved analysis", type=["json"])
    if uploaded is not None and st.session_state.get('loaded_file') != (uploaded.name, uploaded.size):
        st.session_state.loaded_file = (uploaded.name, uploaded.size)
        try:
            st.session_state.report = load_report(uploaded.getvalue())
            st.session_state.min_video_length = None
            st.session_state.error = ''
        except ReportFormatError as e:
            st.session_state.error = str(e)

    channel_input = st.text_input(
        "Channel URL or ID",
        placeholder="https://www.youtube.com/@channel or UC...",
    )

    with st.expander("Advanced Options"):
        length_label = st.selectbox("Minimum Video Length", options=list(MIN_VIDEO_LENGTH_PRESETS.keys()), index=0)
        max_videos = st.number_input(
            f"Max Videos to Analyze ({MIN_MAX_VIDEOS}-{MAX_MAX_VIDEOS})",
            min_value=MIN_MAX_VIDEOS,
            max_value=MAX_MAX_VIDEOS,
            value=DEFAULT_MAX_VIDEOS,
            step=1,
        )

    confirmed = True
    if needs_confirmation(int(max_videos)):
        confirmed = st.checkbox(
            f"Fetching more than {CONFIRMATION_THRESHOLD:,} videos may take some time. Continue?"
        )

    col1, col2 = st.columns([1, 5])
    with col1:
        analyze = st.button("Analyze Channel", type="primary", disabled=not channel_input)
    with col2:
        if st.session_state.report is not None and st.button("Reset"):
            reset_analysis()
            st.rerun()

    if analyze:
        service = get_service(api_key)
        if service is None:
            show_api_error()
        else:
            process_analysis(
                service,
                channel_input,
                MIN_VIDEO_LENGTH_PRESETS[length_label],
                int(max_videos),
                confirmed,
            )

    if st.session_state.error:
        st.error(st.session_state.error)

    if st.session_state.report is not None:
        st.divider()
        render_report(st.session_state.report)


if __name__ == '__main__':
    main()
