"""Sink plugged into a host logger that forwards accepted records.

Purpose
-------
Expose the four operations a log-core plugin needs (``enabled``, ``accept``,
``with_fields``, ``flush``) on top of :class:`LogNotifier`.

Contents
--------
* :class:`RecordSink` – value-like sink whose ``with_fields`` produces
  copy-on-write children.

System Role
-----------
Every nested logging context owns its own sink. Children share the notifier
(client + policy) by reference and copy everything mutable, so sibling sinks
can be used from many threads at once without locks.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from lib_log_ingest.application.ports.encoder import FieldEncoderPort
from lib_log_ingest.domain.levels import HIGH_SEVERITY_THRESHOLD, LogLevel
from lib_log_ingest.domain.metadata import add_record_metadata
from lib_log_ingest.domain.record import Record

from .dispatch import LogNotifier


@dataclass
class RecordSink:
    """Gate, encode, enrich, and dispatch log records.

    Attributes
    ----------
    notifier:
        Shared :class:`LogNotifier`; never copied.
    min_level:
        Records below this level are not forwarded by a conforming host.
    encoder:
        Encoder carrying the fields accumulated by ``with_fields``.
    metadata:
        Tags owned by this sink. Copied on every derivation and every send.
    """

    notifier: LogNotifier
    min_level: LogLevel
    encoder: FieldEncoderPort
    metadata: dict[str, str] = field(default_factory=dict)

    def enabled(self, level: LogLevel | int) -> bool:
        """Return ``True`` when ``level`` meets the configured minimum."""

        return LogLevel.coerce(level) >= self.min_level

    def accept(
        self,
        record: Record,
        fields: Mapping[str, Any] | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Encode ``record`` with ``fields`` and hand it to the notifier.

        Gating is the host's job; calling this for a record below
        ``min_level`` still forwards it. Records above
        :data:`HIGH_SEVERITY_THRESHOLD` are followed by :meth:`flush` once the
        send succeeded.

        Raises
        ------
        EncodingError
            The encoder rejected the record.
        Exception
            Client or :meth:`flush` failures, unchanged.
        """
        clone = self._with(fields)
        data = self.encoder.encode_record(record, fields)
        add_record_metadata(clone.metadata, record)
        self.notifier.notify(data, clone.metadata, cancel=cancel)
        if record.level > HIGH_SEVERITY_THRESHOLD:
            # The process may be about to crash.
            self.flush()

    def with_fields(self, fields: Mapping[str, Any]) -> "RecordSink":
        """Return a child sink whose encoder also carries ``fields``.

        The receiver is left untouched.
        """
        return self._with(fields)

    def flush(self) -> None:
        """Flush buffered output.

        Currently a no-op: in-flight fire-and-forget sends are not awaited and
        nothing guarantees their delivery.
        """

    def _with(self, fields: Mapping[str, Any] | None) -> "RecordSink":
        clone = self._clone()
        if fields:
            clone.encoder.add_fields(fields)
        return clone

    def _clone(self) -> "RecordSink":
        return replace(self, encoder=self.encoder.clone(), metadata=dict(self.metadata))


__all__ = ["RecordSink"]
