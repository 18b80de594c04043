"""Reassembly of numbered chunks into one logical payload per batch id.

All state transitions run on the event loop thread: `submit`, the per-batch
timeout callback and the stale sweep never interleave mid-transition, so the
batch table needs no lock. A timeout that fires after its batch already
completed finds no table entry and does nothing.
"""

from __future__ import annotations

import time
import asyncio
import logging
from typing import Any
from collections.abc import Callable

from adrelay.errors import ChunkValidationError
from adrelay.state.batch import Batch, BatchProgress, SubmitResult, AssembledBatch
from adrelay.config.http import (
    UNKNOWN_REQUEST_ID,
    REASON_INVALID_HEADER,
    REASON_TOTAL_MISMATCH,
    REASON_INDEX_OUT_OF_RANGE,
)
from adrelay.config.batching import (
    SOURCE_SINGLE,
    STATUS_PARTIAL,
    SINGLE_BATCH_ID,
    STATUS_COMPLETE,
    SOURCE_BATCH_PREFIX,
    DEFAULT_BATCH_TIMEOUT_S,
    SOURCE_INCOMPLETE_PREFIX,
    DEFAULT_BATCH_STALE_AFTER_S,
)

from .assembly import assemble_chunks

logger = logging.getLogger(__name__)

FlushFn = Callable[[AssembledBatch], None]
TimeFn = Callable[[], float]


def _item_count(payload: Any) -> int:
    return len(payload) if isinstance(payload, list) else 1


def _validate_position(index: Any, total: Any) -> None:
    # bool is an int subclass; reject it explicitly.
    if not isinstance(total, int) or isinstance(total, bool):
        raise ChunkValidationError("batch total must be an integer", REASON_INVALID_HEADER)
    if not isinstance(index, int) or isinstance(index, bool):
        raise ChunkValidationError("batch index must be an integer", REASON_INVALID_HEADER)
    if total < 1:
        raise ChunkValidationError(f"batch total must be at least 1 (got {total})", REASON_INDEX_OUT_OF_RANGE)
    if index < 0 or index >= total:
        raise ChunkValidationError(
            f"batch index {index} is outside [0, {total})",
            REASON_INDEX_OUT_OF_RANGE,
        )


class BatchAccumulator:
    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_BATCH_TIMEOUT_S,
        stale_after_s: float = DEFAULT_BATCH_STALE_AFTER_S,
        single_batch_id: str = SINGLE_BATCH_ID,
        on_flush: FlushFn | None = None,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.timeout_s = max(0.0, float(timeout_s))
        self.stale_after_s = max(0.0, float(stale_after_s))
        self.single_batch_id = single_batch_id
        self._on_flush = on_flush
        self._now = now_fn or time.monotonic
        self._batches: dict[str, Batch] = {}

    def __len__(self) -> int:
        return len(self._batches)

    def __contains__(self, batch_id: object) -> bool:
        return batch_id in self._batches

    def submit(
        self,
        batch_id: str,
        index: int,
        total: int,
        payload: Any,
        *,
        request_id: str = UNKNOWN_REQUEST_ID,
    ) -> SubmitResult:
        """Record one chunk; assemble and drop the batch once every index arrived."""
        batch_id = batch_id or self.single_batch_id
        _validate_position(index, total)
        if batch_id == self.single_batch_id:
            if total != 1:
                raise ChunkValidationError(
                    f"unbatched chunks must declare total 1 (got {total})",
                    REASON_INDEX_OUT_OF_RANGE,
                )
            return self._accept_single(batch_id, payload, request_id)

        batch = self._batches.get(batch_id)
        if batch is not None and batch.total != total:
            raise ChunkValidationError(
                f"batch {batch_id} was opened with total {batch.total}, chunk declares {total}",
                REASON_TOTAL_MISMATCH,
            )
        if batch is None and total == 1:
            return self._accept_single(batch_id, payload, request_id)

        now = self._now()
        if batch is None:
            batch = Batch(
                id=batch_id,
                total=total,
                request_id=request_id,
                created_at=now,
                last_update_at=now,
            )
            batch.timeout_handle = self._schedule_timeout(batch_id)
            self._batches[batch_id] = batch
            logger.debug("[%s] Opened batch %s expecting %s chunks", request_id, batch_id, total)

        if index in batch.chunks_by_index:
            logger.warning(
                "[%s] Batch %s received index %s again; keeping the latest chunk",
                request_id,
                batch_id,
                index,
            )
        batch.chunks_by_index[index] = payload
        batch.last_update_at = now

        if batch.is_complete():
            self._cancel_timeout(batch)
            del self._batches[batch_id]
            items = assemble_chunks(batch.chunks_by_index, batch.total)
            logger.info("[%s] Batch %s complete: %s items", request_id, batch_id, len(items))
            return SubmitResult(
                status=STATUS_COMPLETE,
                batch_id=batch_id,
                received=batch.total,
                total=batch.total,
                assembled=AssembledBatch(
                    batch_id=batch_id,
                    request_id=request_id,
                    payload=items,
                    item_count=len(items),
                    source=f"{SOURCE_BATCH_PREFIX}{batch_id}",
                ),
            )

        missing = tuple(batch.missing())
        logger.info(
            "[%s] Batch %s progress %s/%s, missing %s",
            request_id,
            batch_id,
            batch.received,
            batch.total,
            list(missing),
        )
        return SubmitResult(
            status=STATUS_PARTIAL,
            batch_id=batch_id,
            received=batch.received,
            total=batch.total,
            missing=missing,
        )

    def force_flush(self, batch_id: str, *, reason: str = "timeout") -> AssembledBatch | None:
        """Deliver whatever arrived for `batch_id`. No-op if the batch is gone."""
        batch = self._batches.pop(batch_id, None)
        if batch is None:
            logger.debug("Force flush of %s skipped: batch no longer pending", batch_id)
            return None
        self._cancel_timeout(batch)

        items = assemble_chunks(batch.chunks_by_index, batch.total)
        missing = tuple(batch.missing())
        logger.warning(
            "[%s] Flushing incomplete batch %s (%s): %s/%s chunks, missing %s",
            batch.request_id,
            batch_id,
            reason,
            batch.received,
            batch.total,
            list(missing),
        )
        assembled = AssembledBatch(
            batch_id=batch_id,
            request_id=batch.request_id,
            payload=items,
            item_count=len(items),
            source=f"{SOURCE_INCOMPLETE_PREFIX}{batch_id}",
            complete=False,
            missing=missing,
        )
        if items:
            self._emit(assembled)
        return assembled

    def sweep_stale(self) -> list[AssembledBatch]:
        """Force-flush batches idle for longer than `stale_after_s`."""
        cutoff = self._now() - self.stale_after_s
        stale_ids = [batch_id for batch_id, batch in self._batches.items() if batch.last_update_at < cutoff]
        flushed: list[AssembledBatch] = []
        for batch_id in stale_ids:
            assembled = self.force_flush(batch_id, reason="stale")
            if assembled is not None:
                flushed.append(assembled)
        if self._batches:
            logger.info("Stale sweep: %s batches still pending", len(self._batches))
        return flushed

    def active_batches(self) -> list[BatchProgress]:
        now = self._now()
        return [
            BatchProgress(
                id=batch.id,
                total=batch.total,
                received=batch.received,
                age_ms=int(max(0.0, now - batch.created_at) * 1000),
            )
            for batch in self._batches.values()
        ]

    def close(self) -> int:
        """Cancel every pending timer and drop all in-flight batches."""
        dropped = len(self._batches)
        for batch in self._batches.values():
            self._cancel_timeout(batch)
        self._batches.clear()
        if dropped:
            logger.info("Dropped %s pending batches on shutdown", dropped)
        return dropped

    def _accept_single(self, batch_id: str, payload: Any, request_id: str) -> SubmitResult:
        count = _item_count(payload)
        logger.info("[%s] Single chunk received: %s items", request_id, count)
        return SubmitResult(
            status=STATUS_COMPLETE,
            batch_id=batch_id,
            received=1,
            total=1,
            assembled=AssembledBatch(
                batch_id=batch_id,
                request_id=request_id,
                payload=payload,
                item_count=count,
                source=SOURCE_SINGLE,
            ),
        )

    def _schedule_timeout(self, batch_id: str) -> asyncio.TimerHandle | None:
        if self.timeout_s <= 0:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; batch %s relies on the stale sweep", batch_id)
            return None
        return loop.call_later(self.timeout_s, self._on_timeout, batch_id)

    @staticmethod
    def _cancel_timeout(batch: Batch) -> None:
        if batch.timeout_handle is not None:
            batch.timeout_handle.cancel()
            batch.timeout_handle = None

    def _on_timeout(self, batch_id: str) -> None:
        batch = self._batches.get(batch_id)
        if batch is not None:
            # Already fired; nothing left to cancel.
            batch.timeout_handle = None
        self.force_flush(batch_id, reason="timeout")

    def _emit(self, assembled: AssembledBatch) -> None:
        if self._on_flush is None:
            return
        try:
            self._on_flush(assembled)
        except Exception:
            logger.exception("[%s] Delivering flushed batch %s failed", assembled.request_id, assembled.batch_id)


__all__ = ["BatchAccumulator"]
