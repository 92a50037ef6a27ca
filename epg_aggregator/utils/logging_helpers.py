"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging without excessive decorative separators.
"""
import logging
from datetime import datetime, timezone


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_channel_processing(logger: logging.Logger, idx: int, total: int, name: str, channel_id: str) -> None:
    """
    Log channel processing header.

    Args:
        logger: Logger instance
        idx: Current channel index (1-based)
        total: Total number of channels
        name: Channel display name
        channel_id: Channel ID
    """
    logger.info(f"[Channel {idx}/{total}] Fetching schedule for {name} ({channel_id})")


def log_run_start(logger: logging.Logger) -> None:
    """Log EPG update start."""
    logger.info(f"EPG update started at {datetime.now(timezone.utc).isoformat()}")


def log_run_end(logger: logging.Logger) -> None:
    """Log EPG update end."""
    logger.info(f"EPG update completed at {datetime.now(timezone.utc).isoformat()}")


def log_aggregate_summary(
    logger: logging.Logger,
    channels_count: int,
    programmes_count: int,
    failed_count: int
) -> None:
    """
    Log aggregation summary.

    Args:
        logger: Logger instance
        channels_count: Number of channels in the document
        programmes_count: Number of programmes in the document
        failed_count: Number of channels skipped after a fetch failure
    """
    logger.info(
        f"Aggregate summary - Channels: {channels_count}, Programmes: {programmes_count}, "
        f"Failed channels: {failed_count}"
    )
