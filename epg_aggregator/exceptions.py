"""
EPG aggregation exceptions

Per-channel and per-entry failures (FetchError, NormalizationError) are
recovered inside the aggregation pipeline. The remaining errors abort the run.
"""


class EPGError(Exception):
    """Base class for all EPG aggregation errors"""
    pass


class FetchError(EPGError):
    """Raised when a channel's schedule (or a provider page) cannot be retrieved"""

    def __init__(self, message: str, *, channel_id: str | None = None):
        self.channel_id = channel_id
        if channel_id:
            message = f"[{channel_id}] {message}"
        super().__init__(message)


class NormalizationError(EPGError, ValueError):
    """Raised when a raw schedule entry cannot be normalized"""
    pass


class TimeParseError(NormalizationError):
    """Raised when a provider start timestamp does not match the expected format"""

    def __init__(self, value: str, time_format: str):
        self.value = value
        self.time_format = time_format
        super().__init__(f"Invalid start time '{value}' (expected format '{time_format}')")


class DurationParseError(NormalizationError):
    """Raised when a duration is not a whole number of minutes and the policy is 'skip'"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid duration '{value}' (expected whole minutes)")


class LoadError(EPGError):
    """Raised when the channel roster cannot be loaded"""
    pass


class EmptyAggregateError(EPGError):
    """Raised when no channel produced a schedule"""

    def __init__(self, channels_requested: int):
        self.channels_requested = channels_requested
        super().__init__(
            f"No valid channels found for EPG ({channels_requested} channel(s) requested)"
        )


class PersistError(EPGError):
    """Raised when a document cannot be serialized or atomically written"""

    def __init__(self, destination: str, cause: BaseException):
        self.destination = destination
        super().__init__(f"Failed to write {destination}: {cause}")
