"""Domain entities and value objects used by the ingestion core."""

from __future__ import annotations

from .errors import ConfigurationError, EncodingError, IngestError, TransportError
from .levels import HIGH_SEVERITY_THRESHOLD, LogLevel
from .metadata import add_record_metadata
from .policy import DEFAULT_BATCHING_INTERVAL, IngestPolicy, validate_resource_tags
from .record import CallerInfo, Record

__all__ = [
    "CallerInfo",
    "ConfigurationError",
    "DEFAULT_BATCHING_INTERVAL",
    "EncodingError",
    "HIGH_SEVERITY_THRESHOLD",
    "IngestError",
    "IngestPolicy",
    "LogLevel",
    "Record",
    "TransportError",
    "add_record_metadata",
    "validate_resource_tags",
]
