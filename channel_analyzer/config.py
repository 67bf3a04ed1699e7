"""
Configuration and Presets

Central configuration for the Channel Analyzer service.
All tunable values, option presets and metric thresholds are defined here.
"""

import logging

from channel_analyzer.errors import ConfirmationDeclined, InputError

# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

BATCH_SIZE = 50  # Max video IDs per listing page / detail request
MAX_LISTING_PAGES = 200  # Hard ceiling on upload-list pages per run
DEFAULT_MIN_VIDEO_LENGTH = 2  # Minutes
DEFAULT_MAX_VIDEOS = 500
MIN_MAX_VIDEOS = 1
MAX_MAX_VIDEOS = 9999
CONFIRMATION_THRESHOLD = 2000  # Larger fetches need explicit confirmation
TOP_VIDEOS_DISPLAYED = 50
REQUEST_DELAY = 0.1  # Seconds between paged API calls
API_KEY_ENV_VAR = "YOUTUBE_API_KEY"

# ============================================================================
# OPTION PRESETS
# ============================================================================

MIN_VIDEO_LENGTH_OPTIONS = (2, 5, 7, 9, 14, 19, 30, 60)

MIN_VIDEO_LENGTH_PRESETS = {
    f"{minutes} minutes": minutes for minutes in MIN_VIDEO_LENGTH_OPTIONS
}

# ============================================================================
# METRIC THRESHOLDS
# ============================================================================

HIDDEN_GEM_THRESHOLD = 0.5
VIRAL_THRESHOLD = 2.0

# ============================================================================
# LOGGING SETUP
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# VALIDATION
# ============================================================================


def validate_options(min_video_length: int, max_videos: int) -> None:
    """
    Check analysis options against the allowed values.

    Args:
        min_video_length: Minimum video length in minutes
        max_videos: Maximum number of videos to analyze

    Raises:
        InputError: If either option is outside its allowed values
    """
    if min_video_length not in MIN_VIDEO_LENGTH_OPTIONS:
        allowed = ", ".join(str(m) for m in MIN_VIDEO_LENGTH_OPTIONS)
        raise InputError(f"Minimum video length must be one of: {allowed} minutes")

    if isinstance(max_videos, bool) or not isinstance(max_videos, int):
        raise InputError("Max videos to analyze must be a whole number")

    if not MIN_MAX_VIDEOS <= max_videos <= MAX_MAX_VIDEOS:
        raise InputError(
            f"Max videos to analyze must be between {MIN_MAX_VIDEOS} and {MAX_MAX_VIDEOS}"
        )


def needs_confirmation(max_videos: int) -> bool:
    """Return True when a fetch of this size must be confirmed by the caller."""
    return max_videos > CONFIRMATION_THRESHOLD


def require_confirmation(max_videos: int, confirm=None) -> None:
    """
    Ask the caller to confirm a large fetch.

    Args:
        max_videos: Requested number of videos
        confirm: Callable taking max_videos and returning True to proceed

    Raises:
        ConfirmationDeclined: If confirmation is needed but not given
    """
    if not needs_confirmation(max_videos):
        return

    if confirm is None or not confirm(max_videos):
        logger.info(f"Fetch of {max_videos} videos was not confirmed")
        raise ConfirmationDeclined(
            f"Fetching {max_videos} videos may take some time and must be confirmed"
        )
