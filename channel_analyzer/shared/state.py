"""Session state management for Channel Analyzer app."""

import os
from typing import Optional

import streamlit as st
from dotenv import load_dotenv

from channel_analyzer.config import API_KEY_ENV_VAR
from channel_analyzer.errors import InputError
from channel_analyzer.pipeline import create_service
from channel_analyzer.youtube_api import YouTubeService


def init_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        'report': None,
        'api_key': '',
        'min_video_length': None,
        'error': '',
    }
    for key, default_value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default_value


def get_env_api_key() -> str:
    """Read the API key from the environment or a .env file."""
    load_dotenv()
    return os.getenv(API_KEY_ENV_VAR, '')


def get_service(api_key: str) -> Optional[YouTubeService]:
    """Get or create a YouTubeService for the given key."""
    cached = st.session_state.get('service')
    if cached is not None and st.session_state.get('service_key') == api_key:
        return cached
    try:
        service = create_service(api_key)
    except InputError:
        return None
    st.session_state.service = service
    st.session_state.service_key = api_key
    return service


def show_api_error():
    """Display API key error message."""
    st.error(f"Please enter your YouTube API key or add {API_KEY_ENV_VAR} to a .env file.")
    st.info("Get your API key from: https://console.cloud.google.com/")


def reset_analysis():
    """Clear the current report and error."""
    st.session_state.report = None
    st.session_state.error = ''
