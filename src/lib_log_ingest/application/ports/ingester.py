"""Port describing the remote log-ingestion client."""

from __future__ import annotations

import threading
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class IngesterClientPort(Protocol):
    """Deliver one log message to the ingestion endpoint.

    Implementations either perform the remote call directly or queue the
    message for batched delivery. They are shared by every sink derived from a
    root sink and must tolerate concurrent calls.
    """

    def send_logs(
        self,
        message: str,
        resource_ids: Mapping[str, str],
        metadata: Mapping[str, str],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Send ``message``; raise on failure. ``cancel`` may be honoured."""


__all__ = ["IngesterClientPort"]
