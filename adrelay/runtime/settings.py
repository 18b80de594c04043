"""Environment parsing for runtime settings.

Names and defaults live in `adrelay/config/*`; this module resolves them at
call time into the structured dataclasses the rest of the server uses.
"""

from __future__ import annotations

import os

from adrelay.state.settings import (
    AppSettings,
    IngestSettings,
    HistorySettings,
    BatchingSettings,
    WebSocketSettings,
)
from adrelay.config.history import (
    ENV_HISTORY_CAPACITY,
    DEFAULT_HISTORY_CAPACITY,
    ENV_NOTIFICATION_CAPACITY,
    DEFAULT_NOTIFICATION_CAPACITY,
)
from adrelay.config.http import (
    ENV_MAX_PAYLOAD_BYTES,
    ENV_MAX_PAYLOAD_DEPTH,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_MAX_PAYLOAD_DEPTH,
)
from adrelay.config.limits import (
    ENV_INGEST_WINDOW_SECONDS,
    DEFAULT_INGEST_WINDOW_SECONDS,
    ENV_INGEST_MAX_REQUESTS_PER_WINDOW,
    DEFAULT_INGEST_MAX_REQUESTS_PER_WINDOW,
)
from adrelay.config.batching import (
    SINGLE_BATCH_ID,
    ENV_BATCH_TIMEOUT_S,
    DEFAULT_BATCH_TIMEOUT_S,
    ENV_BATCH_STALE_AFTER_S,
    ENV_BATCH_SWEEP_INTERVAL_S,
    DEFAULT_BATCH_STALE_AFTER_S,
    DEFAULT_BATCH_SWEEP_INTERVAL_S,
)
from adrelay.config.websocket import (
    ENV_WS_MAX_CONSUMERS,
    ENV_WS_SEND_QUEUE_MAX,
    ENV_WS_SEND_TIMEOUT_S,
    DEFAULT_WS_MAX_CONSUMERS,
    DEFAULT_WS_SEND_QUEUE_MAX,
    DEFAULT_WS_SEND_TIMEOUT_S,
)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _load_batching_settings() -> BatchingSettings:
    timeout_s = _float_env(ENV_BATCH_TIMEOUT_S, DEFAULT_BATCH_TIMEOUT_S)
    if timeout_s <= 0:
        timeout_s = DEFAULT_BATCH_TIMEOUT_S
    stale_after_s = _float_env(ENV_BATCH_STALE_AFTER_S, DEFAULT_BATCH_STALE_AFTER_S)
    if stale_after_s <= 0:
        stale_after_s = DEFAULT_BATCH_STALE_AFTER_S

    return BatchingSettings(
        timeout_s=timeout_s,
        stale_after_s=stale_after_s,
        # 0 disables the sweep.
        sweep_interval_s=max(0.0, _float_env(ENV_BATCH_SWEEP_INTERVAL_S, DEFAULT_BATCH_SWEEP_INTERVAL_S)),
        single_batch_id=SINGLE_BATCH_ID,
    )


def _load_history_settings() -> HistorySettings:
    return HistorySettings(
        capacity=max(1, _int_env(ENV_HISTORY_CAPACITY, DEFAULT_HISTORY_CAPACITY)),
        notification_capacity=max(1, _int_env(ENV_NOTIFICATION_CAPACITY, DEFAULT_NOTIFICATION_CAPACITY)),
    )


def _load_ingest_settings() -> IngestSettings:
    window = _float_env(ENV_INGEST_WINDOW_SECONDS, DEFAULT_INGEST_WINDOW_SECONDS)
    if window <= 0:
        window = DEFAULT_INGEST_WINDOW_SECONDS

    return IngestSettings(
        max_payload_bytes=max(0, _int_env(ENV_MAX_PAYLOAD_BYTES, DEFAULT_MAX_PAYLOAD_BYTES)),
        max_payload_depth=max(1, _int_env(ENV_MAX_PAYLOAD_DEPTH, DEFAULT_MAX_PAYLOAD_DEPTH)),
        max_requests_per_window=max(
            0, _int_env(ENV_INGEST_MAX_REQUESTS_PER_WINDOW, DEFAULT_INGEST_MAX_REQUESTS_PER_WINDOW)
        ),
        window_seconds=window,
    )


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        max_consumers=max(1, _int_env(ENV_WS_MAX_CONSUMERS, DEFAULT_WS_MAX_CONSUMERS)),
        send_queue_max=max(1, _int_env(ENV_WS_SEND_QUEUE_MAX, DEFAULT_WS_SEND_QUEUE_MAX)),
        send_timeout_s=max(0.0, _float_env(ENV_WS_SEND_TIMEOUT_S, DEFAULT_WS_SEND_TIMEOUT_S)),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        batching=_load_batching_settings(),
        history=_load_history_settings(),
        ingest=_load_ingest_settings(),
        websocket=_load_websocket_settings(),
    )


__all__ = ["load_settings"]
