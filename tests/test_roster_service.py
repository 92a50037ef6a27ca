"""Tests for loading and saving the channel roster."""

from __future__ import annotations

from pathlib import Path

import pytest

from epg_aggregator.exceptions import LoadError
from epg_aggregator.schemas import Channel
from epg_aggregator.services.roster_service import load_channels, save_channels

ROSTER = """\
- name: ABC East
  streamName: ABCEast
  path: /channel/abc-east
  id: abc-east
  logo: ""
  pathAlias: /channel/abc
- name: News 24
  path: /channel/news-24
  id: news-24
  pathAlias: null
"""


def test_missing_roster_is_empty(tmp_path: Path) -> None:
    assert load_channels(tmp_path / "tvList.yaml") == []


def test_empty_roster_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "tvList.yaml"
    path.write_text("", encoding="utf-8")

    assert load_channels(path) == []


def test_roster_entries_are_loaded_in_order(tmp_path: Path) -> None:
    path = tmp_path / "tvList.yaml"
    path.write_text(ROSTER, encoding="utf-8")

    channels = load_channels(path)

    assert [channel.id for channel in channels] == ["abc-east", "news-24"]
    assert channels[0].stream_name == "ABCEast"
    assert channels[0].routing_path == "/channel/abc"
    assert channels[1].path_alias == ""
    assert channels[1].routing_path == "/channel/news-24"


def test_numeric_ids_are_read_as_text(tmp_path: Path) -> None:
    path = tmp_path / "tvList.yaml"
    path.write_text("- id: 1234\n  name: 5\n", encoding="utf-8")

    channels = load_channels(path)

    assert channels[0].id == "1234"
    assert channels[0].display_name == "5"


@pytest.mark.parametrize(
    "content",
    [
        "channels: {}\n",
        "- just a string\n",
        "- name: No id\n",
        "- id: ok\n  name: [unclosed\n",
    ],
)
def test_invalid_roster_raises_load_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tvList.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(LoadError):
        load_channels(path)


def test_unreadable_roster_raises_load_error(tmp_path: Path) -> None:
    """A directory in place of the roster file cannot be read."""
    path = tmp_path / "tvList.yaml"
    path.mkdir()

    with pytest.raises(LoadError):
        load_channels(path)


@pytest.mark.asyncio
async def test_saved_roster_uses_roster_keys_and_loads_back(tmp_path: Path) -> None:
    path = tmp_path / "tvList.yaml"
    channels = [
        Channel(id="abc", name="ABC", stream_name="ABCEast", path="/channel/abc"),
        Channel(id="xyz", name="XYZ", path="/channel/xyz", path_alias="/channel/xyz-west"),
    ]

    await save_channels(channels, path)

    text = path.read_text(encoding="utf-8")
    assert "streamName: ABCEast" in text
    assert "pathAlias: /channel/xyz-west" in text
    assert load_channels(path) == channels
    assert not (tmp_path / "tvList.yaml.tmp").exists()


def test_channel_text_is_made_xml_safe() -> None:
    """Roster IDs and names end up in the guide, so control characters are replaced."""
    item = Channel(id="abc\x00", name="ABC\x0bEast", path="/channel/abc")

    assert item.id == "abc\ufffd"
    assert item.display_name == "ABC\ufffdEast"
