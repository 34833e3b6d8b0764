"""Delivery policy shared by every sink derived from one root sink.

Purpose
-------
Capture the settings that decide how log messages reach the ingestion
endpoint: which remote resource they belong to, whether the client batches,
and whether sends may run fire-and-forget.

Contents
--------
* :class:`IngestPolicy` – frozen policy record.
* :func:`validate_resource_tags` – construction-time guard.

System Role
-----------
Built once by :func:`lib_log_ingest.runtime.new_ingest_core` after all options
ran, then read concurrently by sibling sinks without locking. Being frozen is
what makes the lock-free sharing sound.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from .errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from lib_log_ingest.application.ports.auth import AuthProvider


DEFAULT_BATCHING_INTERVAL = timedelta(seconds=10)


def validate_resource_tags(tags: Mapping[str, str] | None) -> dict[str, str]:
    """Return a private copy of ``tags`` or raise when they are missing.

    Examples
    --------
    >>> validate_resource_tags({"system.displayname": "edge-1"})
    {'system.displayname': 'edge-1'}
    >>> validate_resource_tags({})
    Traceback (most recent call last):
    ...
    lib_log_ingest.domain.errors.ConfigurationError: hook initialization failed: resource_mapper_tags are not set
    """
    if not tags:
        raise ConfigurationError("hook initialization failed: resource_mapper_tags are not set")
    return {str(key): str(value) for key, value in tags.items()}


@dataclass(slots=True, frozen=True)
class IngestPolicy:
    """Immutable delivery settings.

    Attributes
    ----------
    resource_mapper_tags:
        Read-only mapping identifying the monitored resource; never empty.
    client_batching_enabled:
        ``True`` when the ingestion client buffers sends internally.
    client_batching_interval:
        Flush cadence used by a batching client.
    auth_provider:
        Optional credential provider handed to the ingestion client.
    async_enabled:
        Allow fire-and-forget sends. Ignored while batching is enabled.
    """

    resource_mapper_tags: Mapping[str, str]
    client_batching_enabled: bool = False
    client_batching_interval: timedelta = DEFAULT_BATCHING_INTERVAL
    auth_provider: "AuthProvider | None" = None
    async_enabled: bool = True

    def __post_init__(self) -> None:
        tags = validate_resource_tags(self.resource_mapper_tags)
        object.__setattr__(self, "resource_mapper_tags", MappingProxyType(tags))
        if self.client_batching_interval <= timedelta(0):
            raise ConfigurationError("client_batching_interval must be positive")

    @property
    def dispatch_async(self) -> bool:
        """Return ``True`` when sends should be fired off without waiting.

        Stacking a fire-and-forget layer on top of a batching client would
        double-buffer, so batching always forces synchronous dispatch.

        Examples
        --------
        >>> tags = {"system.displayname": "edge-1"}
        >>> IngestPolicy(tags, client_batching_enabled=False, async_enabled=True).dispatch_async
        True
        >>> IngestPolicy(tags, client_batching_enabled=True, async_enabled=True).dispatch_async
        False
        >>> IngestPolicy(tags, client_batching_enabled=False, async_enabled=False).dispatch_async
        False
        """
        return not self.client_batching_enabled and self.async_enabled


__all__ = ["DEFAULT_BATCHING_INTERVAL", "IngestPolicy", "validate_resource_tags"]
