"""Periodic stale-batch sweep (backstop for lost per-batch timers)."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from adrelay.config.batching import DEFAULT_BATCH_SWEEP_INTERVAL_S

from .accumulator import BatchAccumulator

logger = logging.getLogger(__name__)


class StaleBatchSweeper:
    def __init__(self, accumulator: BatchAccumulator, *, interval_s: float = DEFAULT_BATCH_SWEEP_INTERVAL_S) -> None:
        self._accumulator = accumulator
        self._interval_s = float(interval_s)
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task | None:
        if self._interval_s <= 0:
            logger.info("Stale batch sweep disabled")
            return None
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(Exception, asyncio.CancelledError):
            await self._task
        self._task = None

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                try:
                    flushed = self._accumulator.sweep_stale()
                except Exception:
                    logger.exception("stale batch sweep failed")
                    continue
                if flushed:
                    logger.warning("Stale sweep flushed %s batches", len(flushed))
        except asyncio.CancelledError:
            return


__all__ = ["StaleBatchSweeper"]
