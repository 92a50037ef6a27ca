"""
Channel Discovery Service

Builds the channel roster by scraping the provider's channel index and
resolving each channel's stream name concurrently.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import re
from dataclasses import dataclass

import httpx
from lxml import etree, html # type: ignore

from epg_aggregator.config import CustomSettings, settings as default_settings
from epg_aggregator.exceptions import FetchError
from epg_aggregator.schemas import Channel
from epg_aggregator.services.roster_service import save_channels
from epg_aggregator.services.source_client import build_http_client, channel_name_from_path
from epg_aggregator.utils.file_operations import fetch_url


logger = logging.getLogger(__name__)

STREAM_NAME_PATTERN = re.compile(r'id="stream_name" name="(.*?)"')


@dataclass(slots=True, frozen=True)
class ChannelLink:
    name: str
    path: str


def parse_channel_index(page: str | bytes, base_url: str) -> list[ChannelLink]:
    """
    Extract channel links from the provider's index page

    Args:
        page: Index page HTML
        base_url: Provider base URL, stripped from absolute links

    Returns:
        One link per anchor under #fallbackContent, in page order
    """
    try:
        document = html.fromstring(page)
    except (etree.ParserError, ValueError) as exc:
        raise FetchError(f"Unparseable channel index page: {exc}") from exc

    links = []
    for anchor in document.xpath('//*[@id="fallbackContent"]//a'):
        href = anchor.get('href') or ''
        links.append(ChannelLink(
            name=anchor.text_content().strip(),
            path=href.replace(base_url, '', 1),
        ))
    return links


def extract_stream_name(page: str) -> str:
    """Return the stream name embedded in a channel page"""
    match = STREAM_NAME_PATTERN.search(page)
    if not match:
        raise FetchError("failed to extract stream_name from page")
    return match.group(1)


class ChannelDiscovery:
    """Discovers the provider's channels"""

    def __init__(
        self,
        config: CustomSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.config = config or default_settings
        self.base_url = self.config.thetv_base_url
        self._transport = transport
        concurrency = self.config.discovery_concurrency
        self._semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    async def discover(self) -> list[Channel]:
        """
        Discover every channel listed on the provider's index page

        Raises:
            FetchError: If the index page cannot be fetched or no channel is found
        """
        async with build_http_client(self.config, self._transport) as client:
            response = await fetch_url(client, self.base_url, deadline=self.config.request_timeout_sec)
            links = parse_channel_index(response.content, self.base_url)
            logger.info("Found %s channel link(s) on %s", len(links), self.base_url)

            usable = [link for link in links if channel_name_from_path(link.path).strip()]
            if len(usable) < len(links):
                logger.warning("Skipping %s link(s) without a channel path", len(links) - len(usable))
            links = usable

            channels = await asyncio.gather(
                *(self._resolve_channel(client, link) for link in links)
            )

        if not channels:
            raise FetchError(f"failed to fetch any TV IDs from {self.base_url}")
        return list(channels)

    async def _resolve_channel(self, client: httpx.AsyncClient, link: ChannelLink) -> Channel:
        channel_id = channel_name_from_path(link.path)
        stream_name = ""
        async with self._slot():
            try:
                response = await fetch_url(
                    client,
                    f"{self.base_url}{link.path}",
                    channel_id=channel_id,
                    deadline=self.config.request_timeout_sec,
                )
                stream_name = extract_stream_name(response.text)
            except FetchError as exc:
                logger.warning("Error fetching stream name for %s: %s", link.name, exc)

        return Channel(
            id=channel_id,
            name=link.name,
            stream_name=stream_name,
            path=link.path,
        )

    def _slot(self) -> contextlib.AbstractAsyncContextManager:
        if self._semaphore is None:
            return contextlib.nullcontext()
        return self._semaphore


async def refresh_roster(
    config: CustomSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None
) -> dict:
    """
    Discover channels and save them as the roster

    Returns:
        Dictionary with refresh statistics

    Raises:
        FetchError: If discovery fails
        PersistError: If the roster cannot be written
    """
    config = config or default_settings
    channels = await ChannelDiscovery(config, transport=transport).discover()
    missing_stream = sum(1 for channel in channels if not channel.stream_name)
    path = await save_channels(channels, config.channels_file)
    return {
        "status": "success",
        "channels": len(channels),
        "channels_without_stream_name": missing_stream,
        "roster_path": str(path),
    }
