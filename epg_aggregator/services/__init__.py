"""
Services package for EPG Aggregator

This package contains all business logic and service layer components.
"""
from epg_aggregator.services.aggregation_service import EPGAggregationPipeline, aggregate_channels
from epg_aggregator.services.channel_discovery_service import refresh_roster
from epg_aggregator.services.document_writer_service import serialize_document, write_document
from epg_aggregator.services.epg_build_service import build_epg
from epg_aggregator.services.normalizer_service import normalize_entry
from epg_aggregator.services.roster_service import load_channels, save_channels
from epg_aggregator.services.source_client import SourceClient, TheTVScheduleClient

__all__ = [
    'EPGAggregationPipeline',
    'aggregate_channels',
    'refresh_roster',
    'serialize_document',
    'write_document',
    'build_epg',
    'normalize_entry',
    'load_channels',
    'save_channels',
    'SourceClient',
    'TheTVScheduleClient',
]
