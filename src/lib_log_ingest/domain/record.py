"""Domain record describing one structured log event.

Purpose
-------
Provide an immutable representation of the fixed attributes a host logger
hands to a sink: severity, timestamp, message, logger name, and caller
location. Ad-hoc structured fields travel next to the record as a mapping so
sinks can merge them into their own accumulated context.

Contents
--------
* :class:`CallerInfo` – call-site location with a trimmed path helper.
* :class:`Record` – frozen dataclass consumed by sinks and encoders.
* Utility function ``_ensure_aware`` for timestamp validation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any

from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class CallerInfo:
    """Location of the statement that produced a record."""

    function: str = ""
    file: str = ""
    line: int = 0

    @property
    def defined(self) -> bool:
        return bool(self.file)

    @property
    def trimmed_path(self) -> str:
        """Return ``"<parent>/<file>:<line>"`` or an empty string when unknown.

        Examples
        --------
        >>> CallerInfo("main", "/srv/app/worker/jobs.py", 42).trimmed_path
        'worker/jobs.py:42'
        >>> CallerInfo().trimmed_path
        ''
        """
        if not self.defined:
            return ""
        parts = PurePath(self.file).parts
        tail = "/".join(parts[-2:]) if len(parts) >= 2 else self.file
        return f"{tail}:{self.line}"


@dataclass(slots=True, frozen=True)
class Record:
    """Immutable log record presented to a sink.

    Attributes
    ----------
    level:
        :class:`LogLevel` severity associated with the record.
    timestamp:
        Time of the event in timezone-aware UTC.
    message:
        Rendered message passed by the caller.
    logger_name:
        Logical logger emitting the record; may be empty.
    caller:
        Optional :class:`CallerInfo` describing the call site.
    stack:
        Optional formatted stack or exception text.
    """

    level: LogLevel
    timestamp: datetime
    message: str
    logger_name: str = ""
    caller: CallerInfo | None = None
    stack: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))

    @classmethod
    def now(cls, level: LogLevel, message: str, **kwargs: Any) -> "Record":
        """Build a record stamped with the current UTC time."""

        return cls(level=level, timestamp=datetime.now(timezone.utc), message=message, **kwargs)

    def replace(self, **changes: Any) -> "Record":
        """Return a copied record with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["CallerInfo", "Record"]
