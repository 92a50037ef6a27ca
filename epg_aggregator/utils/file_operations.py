"""
File and HTTP utilities

This module handles provider HTTP requests and crash-safe file replacement.
"""
import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import httpx

from epg_aggregator.exceptions import FetchError, PersistError


logger = logging.getLogger(__name__)


async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    *,
    channel_id: str | None = None,
    deadline: float | None = None
) -> httpx.Response:
    """
    Issue a GET request and require an exact 200 response

    No retries are attempted: a failure is terminal for this request.

    Args:
        client: Shared HTTP client (carries User-Agent and per-phase timeouts)
        url: URL to fetch
        headers: Extra request headers (e.g. Referer)
        channel_id: Channel the request belongs to, for error context
        deadline: Total seconds allowed for the whole request, body included

    Returns:
        The successful response

    Raises:
        FetchError: On transport errors, timeouts or any non-200 status
    """
    logger.debug(f"GET {url}")
    try:
        response = await asyncio.wait_for(client.get(url, headers=headers), timeout=deadline)
    except asyncio.TimeoutError as e:
        raise FetchError(f"Request to {url} timed out after {deadline}s", channel_id=channel_id) from e
    except httpx.TimeoutException as e:
        raise FetchError(f"Request to {url} timed out: {type(e).__name__}", channel_id=channel_id) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Request to {url} failed: {e}", channel_id=channel_id) from e

    if response.status_code != httpx.codes.OK:
        raise FetchError(
            f"Request to {url} failed: {response.status_code} {response.reason_phrase}",
            channel_id=channel_id,
        )
    return response


def temp_path_for(destination: Path) -> Path:
    """Temporary sibling of destination; same directory keeps the rename atomic"""
    return destination.with_name(destination.name + ".tmp")


async def atomic_write_bytes(destination: Path | str, data: bytes) -> Path:
    """
    Write data to destination with write-to-temp-then-rename semantics

    The previous file at destination is only replaced after the temporary
    file has been completely written.

    Args:
        destination: Final file path
        data: Complete file content

    Returns:
        The destination path

    Raises:
        PersistError: If the write or the rename fails
    """
    destination = Path(destination)
    temp_file = temp_path_for(destination)

    try:
        async with aiofiles.open(temp_file, 'wb') as f:
            await f.write(data)
            await f.flush()
        os.replace(temp_file, destination)
    except OSError as e:
        logger.error(f"Failed to write {destination}: {e}")
        cleanup_temp_file(temp_file)
        raise PersistError(str(destination), e) from e

    file_size = len(data) / 1024
    logger.info(f"Wrote {file_size:.1f} KB to {destination}")
    return destination


def cleanup_temp_file(file_path: Path) -> bool:
    """
    Safely delete a temporary file

    Args:
        file_path: Path to file to delete

    Returns:
        True if deleted successfully, False otherwise
    """
    if not file_path or not file_path.exists():
        return False

    try:
        file_path.unlink()
        logger.debug(f"Cleaned up temporary file: {file_path}")
        return True
    except (OSError, PermissionError) as e:
        logger.warning(f"Failed to delete temporary file {file_path}: {e}")
        return False
