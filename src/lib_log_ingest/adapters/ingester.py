"""Ingestion client adapters implementing :class:`IngesterClientPort`.

Purpose
-------
Ship a delegating HTTP client for the LogicMonitor log-ingest REST endpoint and
a no-op double for tests, so the core can stay agnostic of transport details.

Contents
--------
* :class:`NopIngesterClient` – accepts every send and does nothing.
* :class:`HttpLogIngester` – posts JSON batches with :mod:`requests`, optionally
  buffering on a background worker thread.
* :func:`create_ingester_client` – default factory used by the runtime.

System Role
-----------
Outermost adapter. Retries, TLS, and authentication all live here or in
:mod:`requests`; the dispatch policy never sees them.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Mapping

import requests

from lib_log_ingest.application.ports.auth import AuthProvider
from lib_log_ingest.application.ports.ingester import IngesterClientPort
from lib_log_ingest.domain.errors import TransportError
from lib_log_ingest.domain.policy import DEFAULT_BATCHING_INTERVAL, IngestPolicy

if TYPE_CHECKING:  # pragma: no cover - typing only
    from lib_log_ingest.config import IngestEndpointSettings


LOGGER = logging.getLogger(__name__)

INGEST_PATH = "/log/ingest"
RESOURCE_ID_KEY = "_lm.resourceId"
MESSAGE_KEY = "msg"


class NopIngesterClient(IngesterClientPort):
    """Ingestion client that never sends anything. Used for testing."""

    def send_logs(
        self,
        message: str,
        resource_ids: Mapping[str, str],
        metadata: Mapping[str, str],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NopIngesterClient)

    def __hash__(self) -> int:
        return hash(NopIngesterClient)


class HttpLogIngester(IngesterClientPort):
    """Deliver log entries to the ingest REST endpoint.

    With batching enabled :meth:`send_logs` only appends to an in-memory batch;
    a daemon worker posts the batch every ``batching_interval`` and
    :meth:`close` posts whatever is left. Without batching every call performs
    one request on the caller's thread.

    Examples
    --------
    >>> posted = []
    >>> class FakeSession:
    ...     def post(self, url, *, data, headers, timeout):
    ...         posted.append((url, json.loads(data), headers["Authorization"]))
    ...         return type("Response", (), {"status_code": 202, "text": ""})()
    >>> client = HttpLogIngester(url="https://acme.example/rest/log/ingest", bearer_token="t", session=FakeSession())
    >>> client.send_logs("boom", {"system.displayname": "edge-1"}, {"level": "error"})
    >>> posted[0][1]
    [{'msg': 'boom', '_lm.resourceId': {'system.displayname': 'edge-1'}, 'level': 'error'}]
    >>> posted[0][2]
    'Bearer t'
    """

    def __init__(
        self,
        *,
        url: str,
        bearer_token: str | None = None,
        auth_provider: AuthProvider | None = None,
        batching_enabled: bool = False,
        batching_interval: timedelta = DEFAULT_BATCHING_INTERVAL,
        timeout: float = 10.0,
        max_batch_size: int = 1000,
        session: Any | None = None,
    ) -> None:
        if max_batch_size <= 0:
            raise ValueError("max_batch_size must be positive")
        self._url = url
        self._bearer_token = bearer_token
        self._auth_provider = auth_provider
        self._batching_enabled = batching_enabled
        self._interval = batching_interval.total_seconds()
        self._timeout = timeout
        self._max_batch_size = max_batch_size
        self._session = session if session is not None else requests.Session()
        self._pending: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._closed = False
        self._thread: threading.Thread | None = None
        if batching_enabled:
            self._start_worker()

    @property
    def batching_enabled(self) -> bool:
        return self._batching_enabled

    @property
    def pending(self) -> int:
        """Return the number of entries waiting for the next batch post."""

        with self._lock:
            return len(self._pending)

    def send_logs(
        self,
        message: str,
        resource_ids: Mapping[str, str],
        metadata: Mapping[str, str],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Queue or post one entry.

        Raises
        ------
        TransportError
            ``cancel`` was set, the request failed, or the endpoint answered
            with a non-2xx status. Also raised once the client is closed.
        """
        if self._closed:
            raise TransportError("log ingest client closed")
        if cancel is not None and cancel.is_set():
            raise TransportError("log send cancelled")
        entry = _build_entry(message, resource_ids, metadata)
        if not self._batching_enabled:
            self._post([entry])
            return
        with self._lock:
            if self._closed:
                raise TransportError("log ingest client closed")
            self._pending.append(entry)
            full = len(self._pending) >= self._max_batch_size
        if full:
            self.flush()

    def flush(self) -> None:
        """Post every pending entry now; raise :class:`TransportError` on failure.

        Entries are posted in chunks of ``max_batch_size``. The chunk whose
        post failed is dropped and reported through the raised error; chunks
        not yet attempted go back to the front of the pending batch.
        """

        with self._lock:
            batch, self._pending = self._pending, []
        for start in range(0, len(batch), self._max_batch_size):
            end = start + self._max_batch_size
            try:
                self._post(batch[start:end])
            except Exception:
                self._requeue(batch[end:])
                raise

    def close(self) -> None:
        """Stop the batch worker and post the remaining entries.

        Later :meth:`send_logs` calls raise :class:`TransportError`. Calling
        ``close`` again is harmless.
        """

        with self._lock:
            self._closed = True
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=self._timeout)
            self._thread = None
        self.flush()

    def _requeue(self, entries: list[dict[str, Any]]) -> None:
        if not entries:
            return
        with self._lock:
            self._pending[:0] = entries

    def _start_worker(self) -> None:
        self._thread = threading.Thread(target=self._run, name="lib-log-ingest-batch", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        """Post the pending batch every interval until :meth:`close`."""

        while not self._stop_event.wait(self._interval):
            try:
                self.flush()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Log batch delivery failed; %d entries still pending", self.pending, exc_info=exc)

    def _post(self, entries: list[dict[str, Any]]) -> None:
        if not entries:
            return
        body = json.dumps(entries).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        authorization = self._authorization(body)
        if authorization:
            headers["Authorization"] = authorization
        try:
            response = self._session.post(self._url, data=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"log ingest request failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"log ingest rejected with HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        LOGGER.debug("Delivered %d log entries", len(entries))

    def _authorization(self, body: bytes) -> str | None:
        if self._auth_provider is not None:
            return self._auth_provider.get_credentials("POST", INGEST_PATH, body)
        if self._bearer_token:
            return f"Bearer {self._bearer_token}"
        return None


def _build_entry(message: str, resource_ids: Mapping[str, str], metadata: Mapping[str, str]) -> dict[str, Any]:
    entry: dict[str, Any] = {MESSAGE_KEY: message, RESOURCE_ID_KEY: dict(resource_ids)}
    for key, value in metadata.items():
        entry.setdefault(key, value)
    return entry


def create_ingester_client(
    policy: IngestPolicy,
    settings: "IngestEndpointSettings | None" = None,
) -> HttpLogIngester:
    """Build the default client for ``policy``.

    ``settings`` default to :meth:`IngestEndpointSettings.from_env`, which is
    the only place the package reads the process environment.
    """

    if settings is None:
        from lib_log_ingest.config import IngestEndpointSettings

        settings = IngestEndpointSettings.from_env()
    return HttpLogIngester(
        url=settings.url,
        bearer_token=settings.bearer_token,
        auth_provider=policy.auth_provider,
        batching_enabled=policy.client_batching_enabled,
        batching_interval=policy.client_batching_interval,
        timeout=settings.timeout,
    )


__all__ = ["HttpLogIngester", "NopIngesterClient", "create_ingester_client"]
