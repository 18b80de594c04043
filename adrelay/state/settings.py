"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BatchingSettings:
    timeout_s: float
    stale_after_s: float
    sweep_interval_s: float
    single_batch_id: str


@dataclass(frozen=True, slots=True)
class HistorySettings:
    capacity: int
    notification_capacity: int


@dataclass(frozen=True, slots=True)
class IngestSettings:
    max_payload_bytes: int
    max_payload_depth: int
    max_requests_per_window: int
    window_seconds: float


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    max_consumers: int
    send_queue_max: int
    send_timeout_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    batching: BatchingSettings
    history: HistorySettings
    ingest: IngestSettings
    websocket: WebSocketSettings


__all__ = [
    "AppSettings",
    "BatchingSettings",
    "HistorySettings",
    "IngestSettings",
    "WebSocketSettings",
]
