"""Runtime dependency construction (history, accumulator, fanout, sweeper)."""

from __future__ import annotations

import logging

from adrelay.state import RuntimeDeps
from adrelay.state.settings import AppSettings
from adrelay.state.history import HistoryEntry, Notification
from adrelay.history.buffer import BoundedHistory
from adrelay.handlers.ingest import IngestionEndpoint
from adrelay.delivery.fanout import DeliveryFanout
from adrelay.batching.sweeper import StaleBatchSweeper
from adrelay.handlers.limits import SlidingWindowRateLimiter

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    fanout = DeliveryFanout(max_consumers=settings.websocket.max_consumers)
    ingest = IngestionEndpoint(
        history=BoundedHistory[HistoryEntry](capacity=settings.history.capacity),
        fanout=fanout,
        timeout_s=settings.batching.timeout_s,
        stale_after_s=settings.batching.stale_after_s,
        single_batch_id=settings.batching.single_batch_id,
    )
    sweeper = StaleBatchSweeper(ingest.accumulator, interval_s=settings.batching.sweep_interval_s)

    logger.info(
        "runtime: batch timeout %.0fs, stale after %.0fs, history %s, max consumers %s",
        settings.batching.timeout_s,
        settings.batching.stale_after_s,
        settings.history.capacity,
        settings.websocket.max_consumers,
    )
    return RuntimeDeps(
        ingest=ingest,
        fanout=fanout,
        notifications=BoundedHistory[Notification](capacity=settings.history.notification_capacity),
        sweeper=sweeper,
        ingest_limiter=SlidingWindowRateLimiter(
            limit=settings.ingest.max_requests_per_window,
            window_seconds=settings.ingest.window_seconds,
        ),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
