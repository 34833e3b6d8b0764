"""Use cases composing the dispatch policy and the record sink."""

from __future__ import annotations

from .dispatch import DiagnosticHook, LogNotifier
from .record_sink import RecordSink

__all__ = ["DiagnosticHook", "LogNotifier", "RecordSink"]
