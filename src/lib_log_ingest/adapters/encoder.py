"""Field encoders turning records and structured fields into wire bytes.

Purpose
-------
Provide concrete :class:`FieldEncoderPort` implementations so a sink can be
built without the host supplying its own encoder.

Contents
--------
* :class:`ConsoleFieldEncoder` – tab-separated line with a JSON field suffix.
* :class:`JsonFieldEncoder` – one JSON object per record.

System Role
-----------
Each sink owns one encoder instance; ``with_fields`` clones it and adds the new
context fields to the clone only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from pathlib import PurePath
from typing import Any, Mapping
from uuid import UUID

from lib_log_ingest.application.ports.encoder import FieldEncoderPort
from lib_log_ingest.domain.errors import EncodingError
from lib_log_ingest.domain.record import Record


def _iso8601(ts: datetime) -> str:
    """Render ``ts`` with millisecond precision and a ``Z`` suffix.

    Examples
    --------
    >>> from datetime import timezone
    >>> _iso8601(datetime(2025, 9, 30, 12, 0, 1, 250000, tzinfo=timezone.utc))
    '2025-09-30T12:00:01.250Z'
    """
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return _iso8601(value) if value.tzinfo is not None else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (UUID, PurePath)):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, BaseException):
        return repr(value)
    raise TypeError(f"Object of type {type(value).__name__} is not serialisable")


def _dumps(payload: Mapping[str, Any]) -> str:
    try:
        return json.dumps(payload, default=_json_default, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"failed to encode log fields: {exc}") from exc


@dataclass
class _AccumulatingEncoder:
    """Shared accumulator logic for the bundled encoders."""

    context: dict[str, Any] = field(default_factory=dict)

    def clone(self) -> FieldEncoderPort:
        return type(self)(context=dict(self.context))

    def add_fields(self, fields: Mapping[str, Any]) -> None:
        for key, value in fields.items():
            self.context[str(key)] = value

    def _merged(self, fields: Mapping[str, Any] | None) -> dict[str, Any]:
        merged = dict(self.context)
        if fields:
            merged.update({str(key): value for key, value in fields.items()})
        return merged


@dataclass
class ConsoleFieldEncoder(_AccumulatingEncoder):
    """Encode records as ``ts<TAB>level<TAB>logger<TAB>caller<TAB>msg<TAB>{fields}``.

    Empty logger/caller columns are omitted; the field suffix only appears
    when there are fields. A stack trace, if any, follows on the next line.

    Examples
    --------
    >>> from datetime import timezone
    >>> from lib_log_ingest.domain.levels import LogLevel
    >>> encoder = ConsoleFieldEncoder()
    >>> encoder.add_fields({"request": "r-1"})
    >>> record = Record(LogLevel.INFO, datetime(2025, 9, 30, tzinfo=timezone.utc), "ready", logger_name="main")
    >>> encoder.encode_record(record, {"k": 42})
    b'2025-09-30T00:00:00.000Z\\tinfo\\tmain\\tready\\t{"request": "r-1", "k": 42}\\n'
    """

    def encode_record(self, record: Record, fields: Mapping[str, Any] | None = None) -> bytes:
        columns = [_iso8601(record.timestamp), record.level.severity]
        if record.logger_name:
            columns.append(record.logger_name)
        if record.caller is not None and record.caller.trimmed_path:
            columns.append(record.caller.trimmed_path)
        columns.append(record.message)
        merged = self._merged(fields)
        if merged:
            columns.append(_dumps(merged))
        line = "\t".join(columns)
        if record.stack:
            line = f"{line}\n{record.stack}"
        return (line + "\n").encode("utf-8")


@dataclass
class JsonFieldEncoder(_AccumulatingEncoder):
    """Encode records as single-line JSON objects.

    Record attributes use the keys ``ts``, ``level``, ``logger``, ``caller``,
    ``function``, ``msg`` and ``stacktrace``; structured fields are merged at
    the top level and never override them.
    """

    def encode_record(self, record: Record, fields: Mapping[str, Any] | None = None) -> bytes:
        payload: dict[str, Any] = {
            "ts": _iso8601(record.timestamp),
            "level": record.level.severity,
        }
        if record.logger_name:
            payload["logger"] = record.logger_name
        if record.caller is not None and record.caller.defined:
            payload["caller"] = record.caller.trimmed_path
            payload["function"] = record.caller.function
        payload["msg"] = record.message
        if record.stack:
            payload["stacktrace"] = record.stack
        for key, value in self._merged(fields).items():
            payload.setdefault(key, value)
        return (_dumps(payload) + "\n").encode("utf-8")


__all__ = ["ConsoleFieldEncoder", "JsonFieldEncoder"]
