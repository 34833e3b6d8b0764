"""Dispatch policy deciding how each log send reaches the ingestion client.

Purpose
-------
Own the one decision with real concurrency consequences: whether a send blocks
the logging call or is fired off on a background thread.

Contents
--------
* :class:`LogNotifier` – holds the shared client and policy; :meth:`notify`
  implements the decision table.
* :data:`DiagnosticHook` – optional callback observing dropped async failures.

System Role
-----------
Shared by reference between every :class:`RecordSink` derived from one root
sink. Neither the client reference nor the policy changes after construction,
so concurrent ``notify`` calls need no locking.

Decision table
--------------
1. Batching disabled and async enabled: start a daemon thread and return at
   once. The thread's failure never reaches the caller.
2. Anything else: call the client on the current thread and let its exception
   propagate unchanged.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from lib_log_ingest.application.ports.ingester import IngesterClientPort
from lib_log_ingest.domain.policy import IngestPolicy

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


@dataclass(frozen=True)
class LogNotifier:
    """Forward encoded records to the ingestion client.

    Examples
    --------
    >>> sent = []
    >>> class Recorder:
    ...     def send_logs(self, message, resource_ids, metadata, *, cancel=None):
    ...         sent.append((message, dict(resource_ids), dict(metadata)))
    >>> policy = IngestPolicy({"system.displayname": "edge-1"}, async_enabled=False)
    >>> LogNotifier(client=Recorder(), policy=policy).notify(b"boom", {"env": "dev"})
    >>> sent
    [('boom', {'system.displayname': 'edge-1'}, {'env': 'dev'})]
    """

    client: IngesterClientPort
    policy: IngestPolicy
    diagnostic: DiagnosticHook = None

    def notify(
        self,
        data: bytes,
        metadata: Mapping[str, str],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Send ``data`` with ``metadata`` according to the dispatch policy.

        Parameters
        ----------
        data:
            Encoded record; decoded as UTF-8 before it is handed to the client.
        metadata:
            Per-call metadata copy. The caller must not reuse it afterwards.
        cancel:
            Forwarded to synchronous sends only. Fire-and-forget sends cannot
            be cancelled.

        Raises
        ------
        Exception
            Whatever the client raised on the synchronous path.
        """
        message = data.decode("utf-8", errors="replace")
        if self.policy.dispatch_async:
            worker = threading.Thread(
                target=self._send_detached,
                args=(message, metadata),
                name="lib-log-ingest-send",
                daemon=True,
            )
            worker.start()
            return
        self.client.send_logs(message, self.policy.resource_mapper_tags, metadata, cancel=cancel)

    def _send_detached(self, message: str, metadata: Mapping[str, str]) -> None:
        """Run one fire-and-forget send; failures are dropped."""

        try:
            self.client.send_logs(message, self.policy.resource_mapper_tags, metadata)
        except Exception as exc:  # noqa: BLE001
            self._emit_diagnostic("async_send_dropped", {"exception": repr(exc), "metadata": dict(metadata)})

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        if self.diagnostic is None:
            return
        try:
            self.diagnostic(name, payload)
        except Exception:  # noqa: BLE001
            # The hook runs on a detached thread with nobody left to tell.
            return


__all__ = ["DiagnosticHook", "LogNotifier"]
