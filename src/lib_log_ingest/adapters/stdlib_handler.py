"""Bridge from the stdlib :mod:`logging` package to a :class:`RecordSink`.

Purpose
-------
Let applications that already log through :mod:`logging` forward records to
the ingestion endpoint by attaching one handler, next to whatever console or
file handlers they use.

Contents
--------
* :class:`IngestHandler` – :class:`logging.Handler` gating with
  ``sink.enabled`` and reporting failures through ``handleError``.
* :func:`record_from_logging` – ``LogRecord`` to :class:`Record` conversion.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from lib_log_ingest.application.use_cases import RecordSink
from lib_log_ingest.domain import CallerInfo, LogLevel, Record

LOGGER = logging.getLogger(__name__)

FIELDS_ATTRIBUTE = "fields"
_OWN_LOGGER_PREFIX = "lib_log_ingest"


def record_from_logging(record: logging.LogRecord, formatter: logging.Formatter | None = None) -> Record:
    """Translate a stdlib ``LogRecord`` into a domain :class:`Record`."""

    caller = None
    if record.pathname:
        caller = CallerInfo(function=record.funcName or "", file=record.pathname, line=record.lineno or 0)
    stack = None
    if record.exc_info:
        stack = (formatter or logging.Formatter()).formatException(record.exc_info)
    elif record.exc_text:
        stack = record.exc_text
    if record.stack_info:
        stack = f"{stack}\n{record.stack_info}" if stack else record.stack_info
    return Record(
        level=LogLevel.from_python_level(record.levelno),
        timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        message=record.getMessage(),
        logger_name="" if record.name == "root" else record.name,
        caller=caller,
        stack=stack,
    )


def fields_from_logging(record: logging.LogRecord) -> Mapping[str, Any] | None:
    """Return the ``extra={"fields": {...}}`` mapping attached to ``record``."""

    fields = getattr(record, FIELDS_ATTRIBUTE, None)
    if isinstance(fields, Mapping):
        return fields
    return None


class IngestHandler(logging.Handler):
    """Forward stdlib log records to a :class:`RecordSink`.

    Structured fields travel in ``extra={"fields": {...}}``. Records emitted by
    this package's own loggers are skipped so a failing client cannot feed
    itself.

    Examples
    --------
    >>> from lib_log_ingest.runtime import Params, new_ingest_core, with_blocking, with_nop_ingester_client
    >>> sink = new_ingest_core(Params({"system.displayname": "edge-1"}), with_blocking(), with_nop_ingester_client())
    >>> handler = IngestHandler(sink)
    >>> handler.level == logging.WARNING
    True
    """

    def __init__(self, sink: RecordSink, *, close_client: bool = True) -> None:
        super().__init__(level=sink.min_level.to_python_level())
        self._sink = sink
        self._close_client = close_client

    @property
    def sink(self) -> RecordSink:
        return self._sink

    def with_fields(self, **fields: Any) -> "IngestHandler":
        """Return a handler over a child sink that also carries ``fields``."""

        child = IngestHandler(self._sink.with_fields(fields), close_client=False)
        child.setFormatter(self.formatter)  # type: ignore[arg-type]
        for item in self.filters:
            child.addFilter(item)
        return child

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return False
        if not self._sink.enabled(record.levelno):
            return False
        return bool(super().filter(record))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.accept(record_from_logging(record, self.formatter), fields_from_logging(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def flush(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        """Flush the sink and close its client when this handler owns it.

        Handlers derived through :meth:`with_fields` share the client and
        leave it open. Clients without a ``close`` method are left alone.
        Delivery failures while closing are logged, not raised.
        """

        try:
            self.flush()
            if self._close_client:
                closer = getattr(self._sink.notifier.client, "close", None)
                if callable(closer):
                    closer()
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Closing the ingest client failed", exc_info=exc)
        finally:
            super().close()


__all__ = ["FIELDS_ATTRIBUTE", "IngestHandler", "fields_from_logging", "record_from_logging"]
