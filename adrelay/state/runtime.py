"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import time
import logging
from dataclasses import field, dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from adrelay.state.settings import AppSettings
    from adrelay.state.history import Notification
    from adrelay.history.buffer import BoundedHistory
    from adrelay.handlers.limits import SlidingWindowRateLimiter
    from adrelay.batching.sweeper import StaleBatchSweeper
    from adrelay.delivery.fanout import DeliveryFanout
    from adrelay.handlers.ingest import IngestionEndpoint


@dataclass(slots=True)
class RuntimeDeps:
    ingest: IngestionEndpoint
    fanout: DeliveryFanout
    notifications: BoundedHistory[Notification]
    sweeper: StaleBatchSweeper
    ingest_limiter: SlidingWindowRateLimiter
    settings: AppSettings
    started_at: float = field(default_factory=time.monotonic)

    def uptime_s(self) -> float:
        return time.monotonic() - self.started_at

    async def shutdown(self) -> None:
        try:
            await self.sweeper.stop()
            self.ingest.accumulator.close()
            await self.fanout.close()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
