"""Configuration options applied while a root sink is being built.

Options are plain callables receiving the mutable :class:`CoreSettings`. They
run in the order given, so later options override earlier ones. Nothing here
is reachable once :func:`lib_log_ingest.runtime.new_ingest_core` returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Mapping

from lib_log_ingest.adapters.encoder import ConsoleFieldEncoder
from lib_log_ingest.adapters.ingester import NopIngesterClient
from lib_log_ingest.application.ports import AuthProvider, FieldEncoderPort, IngesterClientPort
from lib_log_ingest.application.use_cases.dispatch import DiagnosticHook
from lib_log_ingest.domain.errors import ConfigurationError
from lib_log_ingest.domain.levels import LogLevel
from lib_log_ingest.domain.policy import DEFAULT_BATCHING_INTERVAL

DEFAULT_LOG_LEVEL = LogLevel.WARNING
DEFAULT_ASYNC = True


@dataclass
class CoreSettings:
    """Mutable construction state consumed by the composition root."""

    min_level: LogLevel = DEFAULT_LOG_LEVEL
    client_batching_enabled: bool = False
    client_batching_interval: timedelta = DEFAULT_BATCHING_INTERVAL
    async_enabled: bool = DEFAULT_ASYNC
    auth_provider: AuthProvider | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    encoder: FieldEncoderPort = field(default_factory=ConsoleFieldEncoder)
    client: IngesterClientPort | None = None
    diagnostic: DiagnosticHook = None


Option = Callable[[CoreSettings], None]


def with_log_level(level: LogLevel | str | int) -> Option:
    """Forward only records at ``level`` or above."""

    try:
        resolved = LogLevel.coerce(level)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    def apply(settings: CoreSettings) -> None:
        settings.min_level = resolved

    return apply


def with_client_batching_enabled(interval: timedelta | float = DEFAULT_BATCHING_INTERVAL) -> Option:
    """Let the ingestion client batch sends, flushing every ``interval``.

    Batching forces synchronous dispatch regardless of :func:`with_async`.
    Plain numbers are read as seconds.
    """

    resolved = interval if isinstance(interval, timedelta) else timedelta(seconds=interval)
    if resolved <= timedelta(0):
        raise ConfigurationError("batching interval must be positive")

    def apply(settings: CoreSettings) -> None:
        settings.client_batching_enabled = True
        settings.client_batching_interval = resolved

    return apply


def with_client_batching_disabled() -> Option:
    """Make the ingestion client post every message on its own."""

    def apply(settings: CoreSettings) -> None:
        settings.client_batching_enabled = False

    return apply


def with_async() -> Option:
    """Send logs fire-and-forget. Has no effect while batching is enabled."""

    def apply(settings: CoreSettings) -> None:
        settings.async_enabled = True

    return apply


def with_blocking() -> Option:
    """Always send logs on the caller's thread and report failures."""

    def apply(settings: CoreSettings) -> None:
        settings.async_enabled = False

    return apply


def with_metadata(metadata: Mapping[str, Any]) -> Option:
    """Seed the metadata tags attached to every log message."""

    seeded = {str(key): str(value) for key, value in metadata.items()}

    def apply(settings: CoreSettings) -> None:
        settings.metadata = dict(seeded)

    return apply


def with_auth_provider(auth_provider: AuthProvider) -> Option:
    """Hand ``auth_provider`` to the default ingestion client."""

    if not isinstance(auth_provider, AuthProvider):
        raise ConfigurationError("auth_provider must implement get_credentials(method, uri, body)")

    def apply(settings: CoreSettings) -> None:
        settings.auth_provider = auth_provider

    return apply


def with_encoder(encoder: FieldEncoderPort) -> Option:
    """Use ``encoder`` instead of the console encoder."""

    def apply(settings: CoreSettings) -> None:
        settings.encoder = encoder

    return apply


def with_ingester_client(client: IngesterClientPort) -> Option:
    """Use ``client`` instead of building one from the environment."""

    def apply(settings: CoreSettings) -> None:
        settings.client = client

    return apply


def with_nop_ingester_client() -> Option:
    """Use a client that drops every message. Intended for tests."""

    return with_ingester_client(NopIngesterClient())


def with_diagnostic_hook(hook: DiagnosticHook) -> Option:
    """Observe fire-and-forget failures that are otherwise dropped."""

    def apply(settings: CoreSettings) -> None:
        settings.diagnostic = hook

    return apply


__all__ = [
    "CoreSettings",
    "DEFAULT_ASYNC",
    "DEFAULT_LOG_LEVEL",
    "Option",
    "with_async",
    "with_auth_provider",
    "with_blocking",
    "with_client_batching_disabled",
    "with_client_batching_enabled",
    "with_diagnostic_hook",
    "with_encoder",
    "with_ingester_client",
    "with_log_level",
    "with_metadata",
    "with_nop_ingester_client",
]
