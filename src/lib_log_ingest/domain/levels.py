"""Log level abstraction shared by the gate and the metadata enrichment.

Purpose
-------
Offer a domain-specific representation of log severities that lines up with
the stdlib ``logging`` constants so records coming from any host logger can be
compared against the configured minimum level.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.
* :data:`HIGH_SEVERITY_THRESHOLD` marking the level above which a sink flushes
  after every successful send.

System Role
-----------
Used by :class:`lib_log_ingest.application.use_cases.record_sink.RecordSink`
for level gating and by the metadata enrichment to render the ``level`` tag.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels used throughout the system."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used for the ``level`` metadata tag."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this level."""

        return getattr(logging, self.name)

    def __ge__(self, other: object) -> bool:
        if isinstance(other, LogLevel):
            return self.value >= other.value
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if isinstance(other, LogLevel):
            return self.value > other.value
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, LogLevel):
            return self.value <= other.value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, LogLevel):
            return self.value < other.value
        return NotImplemented

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`.

        Custom stdlib levels between the standard ones round down to the
        nearest known severity so they can still be gated.

        Examples
        --------
        >>> LogLevel.from_python_level(logging.WARNING) is LogLevel.WARNING
        True
        >>> LogLevel.from_python_level(25) is LogLevel.INFO
        True
        """
        if level < cls.DEBUG.value:
            return cls.DEBUG
        candidates = [member for member in cls if member.value <= level]
        return max(candidates, key=lambda member: member.value)

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` whose value is exactly ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc

    @classmethod
    def coerce(cls, level: "str | int | LogLevel") -> "LogLevel":
        """Normalise names, stdlib integers, and enum members into :class:`LogLevel`.

        Examples
        --------
        >>> LogLevel.coerce("warn") is LogLevel.WARNING
        True
        >>> LogLevel.coerce(40) is LogLevel.ERROR
        True
        """
        if isinstance(level, LogLevel):
            return level
        if isinstance(level, bool):
            raise ValueError(f"Unsupported log level value: {level!r}")
        if isinstance(level, int):
            return cls.from_python_level(level)
        return cls.from_name(level)


HIGH_SEVERITY_THRESHOLD = LogLevel.ERROR
# Records strictly above this level trigger a flush after a successful send.


__all__ = ["HIGH_SEVERITY_THRESHOLD", "LogLevel"]
