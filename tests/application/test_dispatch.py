from __future__ import annotations

import threading
import time
from datetime import timedelta

import pytest

from lib_log_ingest.application.use_cases.dispatch import LogNotifier
from lib_log_ingest.domain.errors import TransportError
from lib_log_ingest.domain.policy import IngestPolicy
from tests.doubles import RESOURCE_TAGS, RecordingClient


def _notifier(client: RecordingClient, *, batching: bool, async_enabled: bool, diagnostic=None) -> LogNotifier:
    policy = IngestPolicy(
        RESOURCE_TAGS,
        client_batching_enabled=batching,
        client_batching_interval=timedelta(seconds=1),
        async_enabled=async_enabled,
    )
    return LogNotifier(client=client, policy=policy, diagnostic=diagnostic)


def test_synchronous_notify_forwards_message_tags_and_metadata(recording_client: RecordingClient) -> None:
    notifier = _notifier(recording_client, batching=False, async_enabled=False)

    notifier.notify(b"test", {"env": "dev"})

    assert recording_client.calls == [("test", RESOURCE_TAGS, {"env": "dev"}, None)]


def test_async_notify_returns_before_slow_failing_client_finishes() -> None:
    client = RecordingClient(delay=0.5, error=TransportError("endpoint down"))
    notifier = _notifier(client, batching=False, async_enabled=True)

    started = time.monotonic()
    notifier.notify(b"test", {"env": "dev"})
    elapsed = time.monotonic() - started

    assert elapsed < 0.25
    assert not client.finished.is_set()
    assert client.finished.wait(timeout=5)


def test_async_failure_is_reported_only_to_diagnostic_hook() -> None:
    reported: list[tuple[str, dict]] = []
    done = threading.Event()

    def hook(name: str, payload: dict) -> None:
        reported.append((name, payload))
        done.set()

    client = RecordingClient(error=TransportError("endpoint down"))
    notifier = _notifier(client, batching=False, async_enabled=True, diagnostic=hook)

    notifier.notify(b"test", {"env": "dev"})

    assert done.wait(timeout=5)
    name, payload = reported[0]
    assert name == "async_send_dropped"
    assert "endpoint down" in payload["exception"]


def test_async_failure_with_raising_hook_stays_silent() -> None:
    done = threading.Event()

    def hook(name: str, payload: dict) -> None:
        done.set()
        raise RuntimeError("hook broke")

    client = RecordingClient(error=TransportError("endpoint down"))
    _notifier(client, batching=False, async_enabled=True, diagnostic=hook).notify(b"test", {})
    assert done.wait(timeout=5)


@pytest.mark.parametrize("async_enabled", [True, False])
def test_batching_blocks_and_propagates_client_error(async_enabled: bool) -> None:
    error = TransportError("rejected", status_code=500)
    client = RecordingClient(delay=0.2, error=error)
    notifier = _notifier(client, batching=True, async_enabled=async_enabled)

    with pytest.raises(TransportError) as excinfo:
        notifier.notify(b"test", {"env": "dev"})

    assert excinfo.value is error
    assert client.finished.is_set()
    assert len(client.calls) == 1


def test_blocking_without_batching_propagates_client_error() -> None:
    error = ConnectionError("reset")
    client = RecordingClient(error=error)
    notifier = _notifier(client, batching=False, async_enabled=False)

    with pytest.raises(ConnectionError) as excinfo:
        notifier.notify(b"test", {})

    assert excinfo.value is error


def test_cancel_event_reaches_synchronous_sends_only() -> None:
    cancel = threading.Event()
    sync_client = RecordingClient()
    _notifier(sync_client, batching=True, async_enabled=True).notify(b"a", {}, cancel=cancel)
    assert sync_client.calls[0][3] is cancel

    async_client = RecordingClient()
    _notifier(async_client, batching=False, async_enabled=True).notify(b"b", {}, cancel=cancel)
    assert async_client.finished.wait(timeout=5)
    assert async_client.calls[0][3] is None


def test_notify_decodes_invalid_utf8_with_replacement(recording_client: RecordingClient) -> None:
    _notifier(recording_client, batching=False, async_enabled=False).notify(b"caf\xff", {})
    assert recording_client.calls[0][0] == "caf\ufffd"
