"""Concrete adapters for encoders, ingestion clients, and the stdlib bridge."""

from __future__ import annotations

from .encoder import ConsoleFieldEncoder, JsonFieldEncoder
from .ingester import HttpLogIngester, NopIngesterClient, create_ingester_client
from .stdlib_handler import IngestHandler

__all__ = [
    "ConsoleFieldEncoder",
    "HttpLogIngester",
    "IngestHandler",
    "JsonFieldEncoder",
    "NopIngesterClient",
    "create_ingester_client",
]
