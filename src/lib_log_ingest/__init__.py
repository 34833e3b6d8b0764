"""Public package surface for forwarding structured logs to a log-ingest endpoint.

``new_ingest_core`` builds a :class:`RecordSink` from resource tags and option
functions; :class:`IngestHandler` attaches it to stdlib logging and
:class:`LoggerProxy` offers a small structured logger on top of it.
"""

from __future__ import annotations

from .adapters import ConsoleFieldEncoder, HttpLogIngester, IngestHandler, JsonFieldEncoder, NopIngesterClient
from .application.ports import AuthProvider, FieldEncoderPort, IngesterClientPort
from .application.use_cases import LogNotifier, RecordSink
from .domain import CallerInfo, ConfigurationError, EncodingError, IngestError, IngestPolicy, LogLevel, Record, TransportError
from .runtime import (
    LoggerProxy,
    Params,
    new_ingest_core,
    with_async,
    with_auth_provider,
    with_blocking,
    with_client_batching_disabled,
    with_client_batching_enabled,
    with_diagnostic_hook,
    with_encoder,
    with_ingester_client,
    with_log_level,
    with_metadata,
    with_nop_ingester_client,
)

__all__ = [
    "AuthProvider",
    "CallerInfo",
    "ConfigurationError",
    "ConsoleFieldEncoder",
    "EncodingError",
    "FieldEncoderPort",
    "HttpLogIngester",
    "IngestError",
    "IngestHandler",
    "IngestPolicy",
    "IngesterClientPort",
    "JsonFieldEncoder",
    "LogLevel",
    "LogNotifier",
    "LoggerProxy",
    "NopIngesterClient",
    "Params",
    "Record",
    "RecordSink",
    "TransportError",
    "new_ingest_core",
    "with_async",
    "with_auth_provider",
    "with_blocking",
    "with_client_batching_disabled",
    "with_client_batching_enabled",
    "with_diagnostic_hook",
    "with_encoder",
    "with_ingester_client",
    "with_log_level",
    "with_metadata",
    "with_nop_ingester_client",
]
