"""Helpers shared by the EPG aggregator tests."""

from __future__ import annotations

import asyncio

from epg_aggregator.exceptions import FetchError
from epg_aggregator.schemas import Channel, RawScheduleEntry

BASE_URL = "https://example.test"


def raw_entry(
    show: str,
    start: str = "2025-01-01T10:00:00+00:00",
    duration: str = "30",
    episode: str = "",
    description: str = "",
) -> RawScheduleEntry:
    """Build a provider entry using the provider's JSON keys."""
    return RawScheduleEntry.model_validate(
        {
            "data-showname": show,
            "data-listdatetime": start,
            "data-duration": duration,
            "data-episodetitle": episode,
            "data-description": description,
        }
    )


def channel(channel_id: str, name: str | None = None, path_alias: str = "") -> Channel:
    return Channel(
        id=channel_id,
        name=name or channel_id.upper(),
        path=f"/channel/{channel_id}",
        path_alias=path_alias,
    )


class FakeSourceClient:
    """In-memory source client with per-channel failures and delays."""

    def __init__(
        self,
        schedules: dict[str, list[RawScheduleEntry]],
        *,
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.schedules = schedules
        self.failing = failing or set()
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_schedule(self, channel_id: str, routing_path: str) -> list[RawScheduleEntry]:
        self.calls.append((channel_id, routing_path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(channel_id, 0))
            if channel_id in self.failing:
                raise FetchError("request failed: 503 Service Unavailable", channel_id=channel_id)
            return list(self.schedules.get(channel_id, []))
        finally:
            self.in_flight -= 1


