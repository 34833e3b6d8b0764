"""Composition root turning :class:`Params` plus options into a root sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

from lib_log_ingest.adapters.ingester import create_ingester_client
from lib_log_ingest.application.ports import IngesterClientPort
from lib_log_ingest.application.use_cases import LogNotifier, RecordSink
from lib_log_ingest.domain.policy import IngestPolicy, validate_resource_tags

from ._options import CoreSettings, Option

ClientFactory = Callable[[IngestPolicy], IngesterClientPort]


@dataclass(frozen=True)
class Params:
    """Required inputs for :func:`new_ingest_core`.

    Attributes
    ----------
    resource_mapper_tags:
        Tags mapping every log message to one monitored resource.
    """

    resource_mapper_tags: Mapping[str, str] = field(default_factory=dict)


def new_ingest_core(
    params: Params,
    *options: Option,
    client_factory: ClientFactory = create_ingester_client,
) -> RecordSink:
    """Build the root :class:`RecordSink`.

    Why
    ---
    Every setting that sibling sinks read concurrently must be final before
    the first record is accepted. Options therefore only touch a scratch
    :class:`CoreSettings`; the frozen :class:`IngestPolicy` is created after
    the last option ran.

    Parameters
    ----------
    params:
        Required resource tags; an empty mapping is rejected.
    *options:
        Option callables from :mod:`lib_log_ingest.runtime._options`, applied
        in order.
    client_factory:
        Called with the final policy when no option supplied a client.

    Raises
    ------
    ConfigurationError
        Missing resource tags or an invalid option value.

    Examples
    --------
    >>> from lib_log_ingest.runtime import with_log_level, with_nop_ingester_client
    >>> sink = new_ingest_core(Params({"system.displayname": "edge-1"}), with_log_level("info"), with_nop_ingester_client())
    >>> sink.enabled(20), sink.enabled(10)
    (True, False)
    """

    tags = validate_resource_tags(params.resource_mapper_tags)
    settings = CoreSettings()
    for option in options:
        option(settings)

    policy = IngestPolicy(
        resource_mapper_tags=tags,
        client_batching_enabled=settings.client_batching_enabled,
        client_batching_interval=settings.client_batching_interval,
        auth_provider=settings.auth_provider,
        async_enabled=settings.async_enabled,
    )
    client = settings.client if settings.client is not None else client_factory(policy)
    notifier = LogNotifier(client=client, policy=policy, diagnostic=settings.diagnostic)
    return RecordSink(
        notifier=notifier,
        min_level=settings.min_level,
        encoder=settings.encoder,
        metadata=dict(settings.metadata),
    )


__all__ = ["ClientFactory", "Params", "new_ingest_core"]
