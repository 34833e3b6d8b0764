"""Hand-written collaborators shared by the test suite."""

from __future__ import annotations

import threading
import time
from typing import Mapping

RESOURCE_TAGS = {"system.displayname": "test-device"}


class RecordingClient:
    """Ingestion client double remembering every send."""

    def __init__(self, *, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, dict[str, str], dict[str, str], threading.Event | None]] = []
        self.finished = threading.Event()
        self._lock = threading.Lock()

    def send_logs(
        self,
        message: str,
        resource_ids: Mapping[str, str],
        metadata: Mapping[str, str],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        try:
            if self.delay:
                time.sleep(self.delay)
            with self._lock:
                self.calls.append((message, dict(resource_ids), dict(metadata), cancel))
            if self.error is not None:
                raise self.error
        finally:
            self.finished.set()


