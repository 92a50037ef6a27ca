"""
EPG Build Service

Runs the full pipeline once: load roster, aggregate schedules, write the document.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from epg_aggregator.config import CustomSettings, settings as default_settings
from epg_aggregator.services.aggregation_service import EPGAggregationPipeline
from epg_aggregator.services.document_writer_service import write_document
from epg_aggregator.services.roster_service import load_channels
from epg_aggregator.services.source_client import SourceClient, TheTVScheduleClient
from epg_aggregator.utils.logging_helpers import (
    log_run_end,
    log_run_start,
    log_section_end,
    log_section_start,
)


logger = logging.getLogger(__name__)


async def build_epg(
    config: CustomSettings | None = None,
    *,
    client: SourceClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> dict:
    """
    Build the EPG document and persist it

    Args:
        config: Settings (defaults to the module-level settings)

    Keyword Args:
        client: Source client to use instead of the provider client
        transport: HTTP transport for the provider client

    Returns:
        Dictionary with run statistics

    Raises:
        LoadError: If the roster cannot be loaded (nothing is fetched)
        EmptyAggregateError: If every channel failed (nothing is written)
        PersistError: If the document cannot be written (previous output kept)
    """
    config = config or default_settings
    started_at = datetime.now(timezone.utc)
    log_run_start(logger)

    log_section_start(logger, "roster load")
    channels = load_channels(config.channels_file)
    log_section_end(logger, "roster load")

    log_section_start(logger, "schedule aggregation")
    if client is None:
        async with TheTVScheduleClient(config, transport=transport) as provider_client:
            pipeline = _build_pipeline(config, channels, provider_client)
            document = await pipeline.run()
    else:
        pipeline = _build_pipeline(config, channels, client)
        document = await pipeline.run()
    log_section_end(logger, "schedule aggregation")

    log_section_start(logger, "document write")
    output = await write_document(document, config.output_path, config.output_time_format)
    log_section_end(logger, "document write")

    log_run_end(logger)

    summaries = pipeline.summaries
    return {
        "status": "success",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "started_at": started_at.isoformat(),
        "output_path": str(output),
        "channels_requested": len(channels),
        "channels_succeeded": len(document.channels),
        "channels_failed": sum(1 for summary in summaries if summary.status == "failed"),
        "programmes_written": len(document.programmes),
        "entries_skipped": sum(summary.entries_skipped for summary in summaries),
        "channel_details": [summary.to_dict() for summary in summaries],
    }


def _build_pipeline(config: CustomSettings, channels, client: SourceClient) -> EPGAggregationPipeline:
    return EPGAggregationPipeline(
        channels,
        client,
        source_time_format=config.source_time_format,
        max_concurrency=config.max_concurrency,
        duration_policy=config.duration_policy,
    )
