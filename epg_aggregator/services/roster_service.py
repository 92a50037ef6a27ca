"""
Roster Service

Loads and saves the channel roster (a YAML list of channel mappings).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import yaml
from pydantic import ValidationError

from epg_aggregator.exceptions import LoadError
from epg_aggregator.schemas import Channel
from epg_aggregator.utils.file_operations import atomic_write_bytes


logger = logging.getLogger(__name__)


def load_channels(path: Path | str) -> list[Channel]:
    """
    Load the channel roster

    An absent roster file is not an error: it yields an empty list.

    Args:
        path: Roster YAML file

    Returns:
        Channels in file order

    Raises:
        LoadError: If the file cannot be read or does not hold a list of channels
    """
    path = Path(path)
    if not path.exists():
        logger.info("%s not found, returning empty list.", path)
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Error reading roster %s: %s", path, exc)
        raise LoadError(f"Cannot read roster {path}: {exc}") from exc

    if data is None:
        return []

    if not isinstance(data, list):
        raise LoadError(f"Roster {path} must contain a list of channels, got {type(data).__name__}")

    channels: list[Channel] = []
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise LoadError(f"Roster {path} entry {position} is not a mapping")
        try:
            channels.append(Channel.model_validate(item))
        except ValidationError as exc:
            raise LoadError(f"Roster {path} entry {position} is invalid: {exc}") from exc

    logger.info("Loaded %s channel(s) from %s", len(channels), path)
    return channels


async def save_channels(channels: Sequence[Channel], path: Path | str) -> Path:
    """
    Atomically write the channel roster

    Raises:
        PersistError: If the write or rename fails
    """
    data = yaml.safe_dump(
        [channel.to_roster_dict() for channel in channels],
        allow_unicode=True,
        sort_keys=False,
    )
    destination = await atomic_write_bytes(path, data.encode("utf-8"))
    logger.info("TV list saved successfully: %s (%s channels)", destination, len(channels))
    return destination
