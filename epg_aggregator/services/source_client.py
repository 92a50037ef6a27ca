"""
Source Client

Retrieves one channel's raw schedule entries from the provider. All
provider-specific extraction lives behind the SourceClient protocol so the
aggregation pipeline never depends on how a schedule is obtained.
"""
from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from epg_aggregator.config import CustomSettings, settings as default_settings
from epg_aggregator.exceptions import FetchError
from epg_aggregator.schemas import RawScheduleEntry
from epg_aggregator.utils.file_operations import fetch_url


logger = logging.getLogger(__name__)

CHANNEL_PATH_PREFIX = "/channel/"

_schedule_adapter = TypeAdapter(list[RawScheduleEntry] | None)


class SourceClient(Protocol):
    async def fetch_schedule(self, channel_id: str, routing_path: str) -> list[RawScheduleEntry]:
        """Return the channel's raw schedule entries or raise FetchError."""
        ...


def build_http_client(config: CustomSettings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the shared HTTP client with the fixed User-Agent and per-phase timeouts

    The total per-request deadline is enforced by fetch_url.
    """
    return httpx.AsyncClient(
        timeout=config.request_timeout_sec,
        headers={"User-Agent": config.user_agent},
        transport=transport,
    )


def channel_name_from_path(path: str) -> str:
    """'/channel/abc' -> 'abc'"""
    return path.replace(CHANNEL_PATH_PREFIX, "")


class TheTVScheduleClient:
    """Fetches per-channel JSON schedules from the provider"""

    def __init__(
        self,
        config: CustomSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.config = config or default_settings
        self.base_url = self.config.thetv_base_url
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TheTVScheduleClient:
        self._client = build_http_client(self.config, self._transport)
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def schedule_url(self, routing_path: str) -> str:
        return f"{self.base_url}/tv_schedules/{channel_name_from_path(routing_path)}.json"

    async def fetch_schedule(self, channel_id: str, routing_path: str) -> list[RawScheduleEntry]:
        """
        Fetch and decode one channel's schedule

        Args:
            channel_id: Channel ID (for error context)
            routing_path: Effective provider path, e.g. '/channel/abc'

        Returns:
            Raw schedule entries in provider order

        Raises:
            FetchError: On transport, status or decode failure
        """
        if self._client is None:
            raise RuntimeError("TheTVScheduleClient must be used as an async context manager")

        url = self.schedule_url(routing_path)
        response = await fetch_url(
            self._client,
            url,
            {"Referer": f"{self.base_url}{routing_path}"},
            channel_id=channel_id,
            deadline=self.config.request_timeout_sec,
        )

        try:
            entries = _schedule_adapter.validate_json(response.content) or []
        except ValidationError as exc:
            raise FetchError(f"Invalid schedule payload from {url}: {exc.error_count()} error(s)", channel_id=channel_id) from exc

        logger.debug("[%s] Decoded %s schedule entries", channel_id, len(entries))
        return entries
