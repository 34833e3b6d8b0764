"""Protocols the ingestion core depends on."""

from __future__ import annotations

from .auth import AuthProvider
from .encoder import FieldEncoderPort
from .ingester import IngesterClientPort

__all__ = ["AuthProvider", "FieldEncoderPort", "IngesterClientPort"]
