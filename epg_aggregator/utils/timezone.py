"""
Date and Time utilities

This module handles provider timestamp parsing and XMLTV timestamp formatting.
Centralizes all date parsing logic to maintain consistency across the application.
"""
from datetime import datetime, timezone
import logging

from epg_aggregator.exceptions import TimeParseError

logger = logging.getLogger(__name__)


def parse_source_datetime(date_str: str, time_format: str) -> datetime:
    """
    Parse a provider start timestamp and return it as UTC

    This is the single source of truth for provider time parsing.

    Args:
        date_str: Provider timestamp (e.g., '2025-01-01T10:00:00+00:00')
        time_format: strptime format the provider uses. Formats without a
            %z directive are read as UTC.

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        TimeParseError: If the string does not match the format
    """
    try:
        dt = datetime.strptime(date_str, time_format)
    except (ValueError, TypeError) as e:
        raise TimeParseError(date_str, time_format) from e

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_xmltv_time(dt: datetime, time_format: str) -> str:
    """
    Format a datetime for the output document

    Args:
        dt: Timezone-aware datetime
        time_format: strftime format shared by every timestamp in the document

    Returns:
        Formatted timestamp, e.g. '20250101100000 +0000'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.strftime(time_format)
