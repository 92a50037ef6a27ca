"""
Shared dataclasses used across the EPG aggregation pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class ChannelEntry:
    """Channel element of the output document."""
    id: str
    display_name: str


@dataclass(slots=True, frozen=True)
class ScheduleRecord:
    """Normalized programme slot; end is always start + duration."""
    channel_id: str
    start: datetime
    end: datetime
    title: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class EPGDocument:
    """Frozen aggregation result handed to the document writer."""
    channels: tuple[ChannelEntry, ...] = ()
    programmes: tuple[ScheduleRecord, ...] = ()

    def programmes_for(self, channel_id: str) -> list[ScheduleRecord]:
        return [record for record in self.programmes if record.channel_id == channel_id]


@dataclass(slots=True)
class DocumentBuilder:
    """Mutable accumulator owned by the aggregation pipeline."""
    channels: list[ChannelEntry] = field(default_factory=list)
    programmes: list[ScheduleRecord] = field(default_factory=list)

    def add_channel(self, entry: ChannelEntry, records: list[ScheduleRecord]) -> None:
        """Append a channel together with its records."""
        self.channels.append(entry)
        self.programmes.extend(records)

    def freeze(self) -> EPGDocument:
        return EPGDocument(channels=tuple(self.channels), programmes=tuple(self.programmes))


__all__ = ["ChannelEntry", "ScheduleRecord", "EPGDocument", "DocumentBuilder"]
