"""
Schedule Normalizer

Converts raw provider entries into ScheduleRecord values. Pure and synchronous:
safe to call from any channel task without synchronization.
"""
import re
from datetime import timedelta
from typing import Literal

from epg_aggregator.exceptions import DurationParseError
from epg_aggregator.schemas import RawScheduleEntry
from epg_aggregator.services.fetch_types import ScheduleRecord
from epg_aggregator.utils.text import xml_safe_text
from epg_aggregator.utils.timezone import parse_source_datetime


DurationPolicy = Literal["zero", "skip"]

_MINUTES_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_duration_minutes(value: str, policy: DurationPolicy = "zero") -> int:
    """
    Parse a duration reported as a whole number of minutes

    Args:
        value: Raw duration string, e.g. '30'
        policy: 'zero' treats a malformed value as 0 minutes,
            'skip' raises DurationParseError

    Returns:
        Duration in minutes
    """
    if _MINUTES_PATTERN.fullmatch(value):
        return int(value)
    if policy == "skip":
        raise DurationParseError(value)
    return 0


def compose_title(show_name: str, episode_title: str) -> str:
    """Show name alone, or 'show - episode' when an episode title is present"""
    if episode_title:
        return f"{show_name} - {episode_title}"
    return show_name


def normalize_entry(
    channel_id: str,
    entry: RawScheduleEntry,
    *,
    source_time_format: str,
    duration_policy: DurationPolicy = "zero"
) -> ScheduleRecord:
    """
    Normalize one raw schedule entry

    Args:
        channel_id: Channel the entry belongs to
        entry: Raw provider entry
        source_time_format: strptime format of entry.list_datetime

    Keyword Args:
        duration_policy: How to treat a malformed duration ('zero' or 'skip')

    Returns:
        ScheduleRecord with end = start + duration; characters XML cannot
        carry in the title and description are replaced with U+FFFD

    Raises:
        TimeParseError: If the start time does not match source_time_format
        DurationParseError: If the duration is malformed and the policy is 'skip'
    """
    start = parse_source_datetime(entry.list_datetime, source_time_format)
    minutes = parse_duration_minutes(entry.duration, duration_policy)
    try:
        end = start + timedelta(minutes=minutes)
    except OverflowError as e:
        raise DurationParseError(entry.duration) from e

    return ScheduleRecord(
        channel_id=channel_id,
        start=start,
        end=end,
        title=xml_safe_text(compose_title(entry.show_name, entry.episode_title)),
        description=xml_safe_text(entry.description),
    )
