from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lib_log_ingest.domain import CallerInfo, LogLevel, Record
from tests.doubles import RecordingClient


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def sample_record() -> Record:
    return Record(
        level=LogLevel.INFO,
        timestamp=datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc),
        message="test",
        logger_name="main",
        caller=CallerInfo(function="main.run", file="/srv/app/cmd/main.py", line=42),
        stack="fake-stack",
    )
