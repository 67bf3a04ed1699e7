"""
Exceptions

Failure types raised by the Channel Analyzer service. Every failure is
local to one analysis run; callers start a new run after handling it.
"""


class AnalysisError(Exception):
    """Base exception for a failed analysis or report operation."""
    pass


class InputError(AnalysisError):
    """Raised for missing credentials, missing channel references or bad options."""
    pass


class ConfirmationDeclined(InputError):
    """Raised when a large fetch was not confirmed by the caller."""
    pass


class ChannelNotFoundError(AnalysisError):
    """Raised when a channel reference cannot be mapped to a channel ID."""

    def __init__(self, message: str = "Could not find channel. Please check the URL or ID."):
        super().__init__(message)


class YouTubeAPIError(AnalysisError):
    """Raised when the YouTube API responds with an error envelope."""
    pass


class NoVideosError(AnalysisError):
    """Raised when no videos are left to analyze after filtering."""
    pass


class ReportFormatError(AnalysisError):
    """Raised when a saved report cannot be loaded."""

    def __init__(self, message: str = "Invalid data file. Please check the file format."):
        super().__init__(message)
