from __future__ import annotations

import sys
from pathlib import Path

import pytest

from adrelay.state.settings import (
    AppSettings,
    IngestSettings,
    HistorySettings,
    BatchingSettings,
    WebSocketSettings,
)


def pytest_configure() -> None:
    # Keep `import adrelay...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


def build_settings(
    *,
    timeout_s: float = 30.0,
    stale_after_s: float = 300.0,
    history_capacity: int = 100,
    max_requests_per_window: int = 0,
    max_consumers: int = 10,
    max_payload_bytes: int = 9 * 1024 * 1024,
) -> AppSettings:
    return AppSettings(
        batching=BatchingSettings(
            timeout_s=timeout_s,
            stale_after_s=stale_after_s,
            sweep_interval_s=0.0,
            single_batch_id="single",
        ),
        history=HistorySettings(capacity=history_capacity, notification_capacity=50),
        ingest=IngestSettings(
            max_payload_bytes=max_payload_bytes,
            max_payload_depth=10,
            max_requests_per_window=max_requests_per_window,
            window_seconds=60.0,
        ),
        websocket=WebSocketSettings(max_consumers=max_consumers, send_queue_max=16, send_timeout_s=1.0),
    )


@pytest.fixture
def app_settings() -> AppSettings:
    return build_settings()


@pytest.fixture
def make_settings():
    return build_settings
