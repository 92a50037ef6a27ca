"""Concurrent EPG aggregation: many channel schedules in, one XMLTV document out."""

__version__ = "0.1.0"
