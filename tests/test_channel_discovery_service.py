"""Tests for provider channel discovery and roster refresh."""

from __future__ import annotations

import httpx
import pytest

from _helpers import BASE_URL
from epg_aggregator.exceptions import FetchError
from epg_aggregator.services.channel_discovery_service import (
    ChannelDiscovery,
    extract_stream_name,
    parse_channel_index,
    refresh_roster,
)
from epg_aggregator.services.roster_service import load_channels

INDEX_PAGE = f"""
<html><body>
  <div id="fallbackContent">
    <ul>
      <li><a href="{BASE_URL}/channel/abc-east">  ABC East </a></li>
      <li><a href="/channel/news-24">News <b>24</b></a></li>
    </ul>
  </div>
  <a href="/channel/not-listed">Footer link</a>
</body></html>
"""


def _provider(pages: dict[str, tuple[int, str]]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = pages.get(request.url.path, (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


def test_parse_channel_index_reads_fallback_links() -> None:
    links = parse_channel_index(INDEX_PAGE, BASE_URL)

    assert [(link.name, link.path) for link in links] == [
        ("ABC East", "/channel/abc-east"),
        ("News 24", "/channel/news-24"),
    ]


def test_extract_stream_name() -> None:
    page = '<input type="hidden" id="stream_name" name="ABCEast">'
    assert extract_stream_name(page) == "ABCEast"

    with pytest.raises(FetchError, match="stream_name"):
        extract_stream_name("<html></html>")


@pytest.mark.asyncio
async def test_discover_keeps_channels_whose_stream_name_fails(make_settings) -> None:
    transport = _provider(
        {
            "/": (200, INDEX_PAGE),
            "/channel/abc-east": (200, '<input id="stream_name" name="ABCEast">'),
            "/channel/news-24": (500, "error"),
        }
    )

    channels = await ChannelDiscovery(make_settings(), transport=transport).discover()

    assert [(channel.id, channel.name, channel.stream_name) for channel in channels] == [
        ("abc-east", "ABC East", "ABCEast"),
        ("news-24", "News 24", ""),
    ]
    assert channels[0].path == "/channel/abc-east"


@pytest.mark.asyncio
async def test_discover_without_channels_raises(make_settings) -> None:
    transport = _provider({"/": (200, "<html><body><p>maintenance</p></body></html>")})

    with pytest.raises(FetchError, match="failed to fetch any TV IDs"):
        await ChannelDiscovery(make_settings(), transport=transport).discover()


@pytest.mark.asyncio
async def test_discover_index_failure_raises(make_settings) -> None:
    with pytest.raises(FetchError, match="503"):
        await ChannelDiscovery(make_settings(), transport=_provider({"/": (503, "down")})).discover()


@pytest.mark.asyncio
async def test_refresh_roster_writes_loadable_roster(make_settings) -> None:
    config = make_settings(discovery_concurrency=1)
    transport = _provider(
        {
            "/": (200, INDEX_PAGE),
            "/channel/abc-east": (200, '<input id="stream_name" name="ABCEast">'),
            "/channel/news-24": (200, '<input id="stream_name" name="News24">'),
        }
    )
    result = await refresh_roster(config, transport=transport)

    assert result["channels"] == 2
    assert result["channels_without_stream_name"] == 0
    channels = load_channels(config.channels_file)
    assert [channel.stream_name for channel in channels] == ["ABCEast", "News24"]
