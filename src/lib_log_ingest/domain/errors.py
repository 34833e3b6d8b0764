"""Error taxonomy raised by the ingestion core and its bundled adapters."""

from __future__ import annotations


class IngestError(Exception):
    """Base class for failures raised by :mod:`lib_log_ingest`."""


class ConfigurationError(IngestError, ValueError):
    """Construction-time configuration is invalid; no sink is produced."""


class EncodingError(IngestError):
    """The field encoder could not serialise a record."""


class TransportError(IngestError):
    """The ingestion client failed to deliver a log message.

    Attributes
    ----------
    status_code:
        HTTP status returned by the endpoint, ``None`` for connection-level
        failures or cancellations.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["ConfigurationError", "EncodingError", "IngestError", "TransportError"]
