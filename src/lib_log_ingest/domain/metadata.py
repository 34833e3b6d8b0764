"""Per-record metadata enrichment."""

from __future__ import annotations

from typing import MutableMapping

from .record import Record


def add_record_metadata(metadata: MutableMapping[str, str] | None, record: Record) -> None:
    """Write ``level``, ``function``, ``logger`` and ``caller`` tags into ``metadata``.

    ``metadata`` must be the per-call copy, never a map shared with a parent
    sink. ``logger`` and ``caller`` are only written when the record carries
    them; ``function`` is always written, empty when the caller is unknown.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_ingest.domain.levels import LogLevel
    >>> from lib_log_ingest.domain.record import CallerInfo
    >>> record = Record(LogLevel.INFO, datetime(2025, 1, 1, tzinfo=timezone.utc), "hi",
    ...                 logger_name="main", caller=CallerInfo("run", "/srv/app/main.py", 7))
    >>> tags = {"env": "staging"}
    >>> add_record_metadata(tags, record)
    >>> sorted(tags.items())
    [('caller', 'app/main.py:7'), ('env', 'staging'), ('function', 'run'), ('level', 'info'), ('logger', 'main')]
    """
    if metadata is None:
        return
    caller = record.caller
    metadata["level"] = record.level.severity
    metadata["function"] = caller.function if caller is not None else ""
    if record.logger_name:
        metadata["logger"] = record.logger_name
    trimmed = caller.trimmed_path if caller is not None else ""
    if trimmed:
        metadata["caller"] = trimmed


__all__ = ["add_record_metadata"]
