"""
Channel Resolution

Turn what a user pastes (a channel ID, a channel URL, an @handle URL or
a bare name) into a canonical UC... channel ID.
"""

import logging
import re
from typing import Optional

from channel_analyzer.errors import AnalysisError
from channel_analyzer.youtube_api import YouTubeService

logger = logging.getLogger(__name__)

CHANNEL_ID_PREFIX = "UC"
CHANNEL_ID_LENGTH = 24

# Checked in order; the first capture group is the candidate
URL_PATTERNS = [
    re.compile(r'youtube\.com/channel/(UC[\w-]{22})'),
    re.compile(r'youtube\.com/@([\w.-]+)'),
    re.compile(r'youtube\.com/c/([\w.-]+)'),
    re.compile(r'youtube\.com/user/([\w.-]+)'),
]


def is_channel_id(value: str) -> bool:
    """Return True if value already has the canonical channel ID shape."""
    return value.startswith(CHANNEL_ID_PREFIX) and len(value) == CHANNEL_ID_LENGTH


def extract_channel_candidate(channel_input: str) -> str:
    """
    Extract a channel ID or handle from user input.

    Supported formats:
    - UCxxxxxxxxxxxxxxxxxxxxxx (bare channel ID)
    - https://youtube.com/channel/UCxxxxxxxx
    - https://youtube.com/@handle
    - https://youtube.com/c/CustomName
    - https://youtube.com/user/LegacyName
    - anything else is returned trimmed and treated as a handle

    Args:
        channel_input: Raw user input

    Returns:
        Channel ID or handle candidate
    """
    clean_input = channel_input.strip()

    if is_channel_id(clean_input):
        return clean_input

    for pattern in URL_PATTERNS:
        match = pattern.search(clean_input)
        if match:
            return match.group(1)

    return clean_input


def resolve_channel_id(service: YouTubeService, candidate: str) -> Optional[str]:
    """
    Resolve a candidate from extract_channel_candidate to a channel ID.

    Tries a direct handle lookup first and falls back to a channel search
    by name. API failures are logged and reported as not found.

    Args:
        service: YouTubeService instance
        candidate: Channel ID or handle candidate

    Returns:
        Canonical channel ID, or None if the channel could not be found
    """
    if is_channel_id(candidate):
        return candidate

    handle = candidate.lstrip('@')
    if not handle:
        return None

    # A rejected handle still falls through to the name search
    try:
        channel_id = service.find_channel_id_by_handle(handle)
        if channel_id:
            logger.info(f"Resolved handle '{handle}' to {channel_id}")
            return channel_id
    except (AnalysisError, KeyError) as e:
        logger.warning(f"Handle lookup failed for '{handle}': {e}")

    try:
        channel_id = service.search_channel_id(handle)
        if channel_id:
            logger.info(f"Resolved '{handle}' to {channel_id} via search")
            return channel_id
    except (AnalysisError, KeyError) as e:
        logger.warning(f"Error resolving channel '{candidate}': {e}")

    return None
