"""
EPG Aggregation Service

Fans schedule fetches out across every roster channel and merges the
normalized results into one EPGDocument, isolating failures to the channel
(or entry) that produced them.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Sequence

from epg_aggregator.exceptions import EmptyAggregateError, NormalizationError
from epg_aggregator.schemas import Channel
from epg_aggregator.services.fetch_types import (
    ChannelEntry,
    DocumentBuilder,
    EPGDocument,
    ScheduleRecord,
)
from epg_aggregator.services.normalizer_service import DurationPolicy, normalize_entry
from epg_aggregator.services.source_client import SourceClient
from epg_aggregator.utils.logging_helpers import log_aggregate_summary, log_channel_processing


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChannelSummary:
    index: int
    channel_id: str
    display_name: str
    routing_path: str
    started_at: datetime
    completed_at: datetime
    status: Literal["success", "failed"]
    entries_fetched: int = 0
    entries_skipped: int = 0
    error: str | None = None
    entry: ChannelEntry | None = None
    records: list[ScheduleRecord] = field(default_factory=list)

    @property
    def records_normalized(self) -> int:
        return self.entries_fetched - self.entries_skipped

    @property
    def duration_seconds(self) -> float:
        return max(0.0, (self.completed_at - self.started_at).total_seconds())

    def to_dict(self) -> dict:
        payload = {
            "channel_index": self.index,
            "channel_id": self.channel_id,
            "display_name": self.display_name,
            "routing_path": self.routing_path,
            "status": self.status,
            "entries_fetched": self.entries_fetched,
            "entries_skipped": self.entries_skipped,
            "records_normalized": self.records_normalized,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }
        if self.error:
            payload["error"] = self.error
        return payload


class EPGAggregationPipeline:
    """Coordinates per-channel fetch, normalization and merge for one run."""

    def __init__(
        self,
        channels: Sequence[Channel],
        client: SourceClient,
        *,
        source_time_format: str,
        max_concurrency: int | None = None,
        duration_policy: DurationPolicy = "zero",
    ) -> None:
        self.channels = list(channels)
        self.total_channels = len(self.channels)
        self.client = client
        self.source_time_format = source_time_format
        self.duration_policy = duration_policy
        self._concurrency = max_concurrency or None
        self._semaphore = asyncio.Semaphore(self._concurrency) if self._concurrency else None
        self.summaries: list[ChannelSummary] = []

    async def run(self) -> EPGDocument:
        """
        Fetch every channel concurrently and build the document

        Returns:
            The frozen document; channels that failed to fetch are absent

        Raises:
            EmptyAggregateError: If no channel succeeded
        """
        logger.info(
            "Aggregating %s channel(s) (concurrency: %s)",
            self.total_channels,
            self._concurrency or "unbounded",
        )

        builder = DocumentBuilder()
        self.summaries = []

        tasks = [
            asyncio.create_task(self._run_channel(index, channel))
            for index, channel in enumerate(self.channels, start=1)
        ]

        # Sole consumer of channel results; the only code that mutates the builder
        for next_done in asyncio.as_completed(tasks):
            summary = await next_done
            self.summaries.append(summary)
            if summary.status == "success" and summary.entry is not None:
                builder.add_channel(summary.entry, summary.records)

        self.summaries.sort(key=lambda summary: summary.index)
        failures = sum(1 for summary in self.summaries if summary.status == "failed")
        log_aggregate_summary(logger, len(builder.channels), len(builder.programmes), failures)

        if not builder.channels:
            logger.error("No valid channels found for EPG")
            raise EmptyAggregateError(self.total_channels)

        return builder.freeze()

    async def _run_channel(self, index: int, channel: Channel) -> ChannelSummary:
        """Task body; never raises so the consolidation loop always sees every channel"""
        started_at = datetime.now(timezone.utc)
        try:
            return await self._process_channel(index, channel, started_at)
        except Exception as exc:
            logger.error(
                "[Channel %s] Unexpected error processing %s (%s): %s",
                index,
                channel.display_name,
                channel.id,
                exc,
                exc_info=True,
            )
            return self._failed_summary(index, channel, started_at, exc)

    async def _process_channel(self, index: int, channel: Channel, started_at: datetime) -> ChannelSummary:
        routing_path = channel.routing_path

        async with self._slot():
            log_channel_processing(logger, index, self.total_channels, channel.display_name, channel.id)
            try:
                raw_entries = await self.client.fetch_schedule(channel.id, routing_path)
            except Exception as exc:
                logger.warning(
                    "[Channel %s] Failed to fetch schedule for %s (%s): %s",
                    index,
                    channel.display_name,
                    channel.id,
                    exc,
                )
                return self._failed_summary(index, channel, started_at, exc)

        records: list[ScheduleRecord] = []
        skipped = 0
        for position, raw_entry in enumerate(raw_entries, start=1):
            try:
                records.append(
                    normalize_entry(
                        channel.id,
                        raw_entry,
                        source_time_format=self.source_time_format,
                        duration_policy=self.duration_policy,
                    )
                )
            except NormalizationError as exc:
                skipped += 1
                logger.warning(
                    "[Channel %s] Skipping entry %s of %s (%s): %s",
                    index,
                    position,
                    channel.id,
                    raw_entry.show_name or "untitled",
                    exc,
                )

        logger.info(
            "[Channel %s/%s] Completed %s: %s records (%s skipped)",
            index,
            self.total_channels,
            channel.id,
            len(records),
            skipped,
        )

        return ChannelSummary(
            index=index,
            channel_id=channel.id,
            display_name=channel.display_name,
            routing_path=routing_path,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            status="success",
            entries_fetched=len(raw_entries),
            entries_skipped=skipped,
            entry=ChannelEntry(id=channel.id, display_name=channel.display_name),
            records=records,
        )

    @staticmethod
    def _failed_summary(index: int, channel: Channel, started_at: datetime, exc: Exception) -> ChannelSummary:
        return ChannelSummary(
            index=index,
            channel_id=channel.id,
            display_name=channel.display_name,
            routing_path=channel.routing_path,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            status="failed",
            error=str(exc),
        )

    def _slot(self) -> contextlib.AbstractAsyncContextManager:
        if self._semaphore is None:
            return contextlib.nullcontext()
        return self._semaphore


async def aggregate_channels(
    channels: Sequence[Channel],
    client: SourceClient,
    *,
    source_time_format: str,
    max_concurrency: int | None = None,
    duration_policy: DurationPolicy = "zero",
) -> EPGDocument:
    """Run one aggregation pass and return the document."""
    pipeline = EPGAggregationPipeline(
        channels,
        client,
        source_time_format=source_time_format,
        max_concurrency=max_concurrency,
        duration_policy=duration_policy,
    )
    return await pipeline.run()
