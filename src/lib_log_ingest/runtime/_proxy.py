"""Structured logger facade over a :class:`RecordSink`."""

from __future__ import annotations

import sys
from typing import Any

from lib_log_ingest.application.use_cases import RecordSink
from lib_log_ingest.domain import CallerInfo, LogLevel, Record


class LoggerProxy:
    """Lightweight structured logger forwarding straight to a sink.

    Unlike the stdlib bridge, failures are raised to the caller, which is the
    host's error-reporting path for this facade.

    Examples
    --------
    >>> from lib_log_ingest.runtime import Params, new_ingest_core, with_log_level, with_nop_ingester_client
    >>> sink = new_ingest_core(Params({"system.displayname": "edge-1"}), with_log_level("info"), with_nop_ingester_client())
    >>> log = LoggerProxy("worker", sink).with_fields(job="nightly")
    >>> log.info("started", attempt=1)
    True
    >>> log.debug("skipped")
    False
    """

    def __init__(self, name: str, sink: RecordSink) -> None:
        self._name = name
        self._sink = sink

    @property
    def name(self) -> str:
        return self._name

    @property
    def sink(self) -> RecordSink:
        return self._sink

    def with_fields(self, **fields: Any) -> "LoggerProxy":
        """Return a proxy whose records also carry ``fields``."""

        return LoggerProxy(self._name, self._sink.with_fields(fields))

    def named(self, name: str) -> "LoggerProxy":
        """Return a proxy for the child logger ``<name>.<child>``."""

        full = f"{self._name}.{name}" if self._name else name
        return LoggerProxy(full, self._sink)

    def debug(self, message: str, **fields: Any) -> bool:
        return self._log(LogLevel.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> bool:
        return self._log(LogLevel.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> bool:
        return self._log(LogLevel.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> bool:
        return self._log(LogLevel.ERROR, message, fields)

    def critical(self, message: str, **fields: Any) -> bool:
        return self._log(LogLevel.CRITICAL, message, fields)

    def _log(self, level: LogLevel, message: str, fields: dict[str, Any]) -> bool:
        """Forward one record when ``level`` passes the gate.

        Returns ``True`` when the record was handed to the sink.
        """
        if not self._sink.enabled(level):
            return False
        record = Record.now(level, message, logger_name=self._name, caller=_caller(depth=3))
        self._sink.accept(record, fields)
        return True


def _caller(depth: int) -> CallerInfo | None:
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return None
    code = frame.f_code
    return CallerInfo(function=code.co_name, file=code.co_filename, line=frame.f_lineno)


__all__ = ["LoggerProxy"]
