"""Port for encoders turning records plus structured fields into wire bytes."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from lib_log_ingest.domain.record import Record


@runtime_checkable
class FieldEncoderPort(Protocol):
    """Serialise records and accumulate context fields.

    The accumulator must support cloning: fields added to a clone never show up
    in the encoder it was cloned from.
    """

    def clone(self) -> "FieldEncoderPort":
        """Return an encoder with an independent copy of the accumulated fields."""

    def add_fields(self, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into this encoder's accumulated context."""

    def encode_record(self, record: Record, fields: Mapping[str, Any] | None = None) -> bytes:
        """Return the wire representation of ``record`` with context and ``fields``."""


__all__ = ["FieldEncoderPort"]
