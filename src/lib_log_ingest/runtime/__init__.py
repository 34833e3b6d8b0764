"""Runtime façade assembling the ingestion core.

Purpose
-------
Expose the entry points host applications use instead of importing the inner
layers directly: :func:`new_ingest_core`, the option functions, and
:class:`LoggerProxy`.

System Role
-----------
Outer shell of the clean-architecture stack: the core depends only on ports,
while this package picks the concrete encoder and ingestion client.
"""

from __future__ import annotations

from ._composition import ClientFactory, Params, new_ingest_core
from ._options import (
    DEFAULT_ASYNC,
    DEFAULT_LOG_LEVEL,
    CoreSettings,
    Option,
    with_async,
    with_auth_provider,
    with_blocking,
    with_client_batching_disabled,
    with_client_batching_enabled,
    with_diagnostic_hook,
    with_encoder,
    with_ingester_client,
    with_log_level,
    with_metadata,
    with_nop_ingester_client,
)
from ._proxy import LoggerProxy

__all__ = [
    "ClientFactory",
    "CoreSettings",
    "DEFAULT_ASYNC",
    "DEFAULT_LOG_LEVEL",
    "LoggerProxy",
    "Option",
    "Params",
    "new_ingest_core",
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
