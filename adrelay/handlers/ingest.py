"""Ingestion orchestration: chunk in, acknowledgement out, payload to history and fanout."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from adrelay.timeutil import utc_now_iso
from adrelay.state.history import HistoryEntry
from adrelay.history.buffer import BoundedHistory
from adrelay.state.batch import Chunk, AssembledBatch
from adrelay.delivery.fanout import DeliveryFanout
from adrelay.batching.accumulator import BatchAccumulator
from adrelay.config.batching import (
    SOURCE_SINGLE,
    SINGLE_BATCH_ID,
    DEFAULT_BATCH_TIMEOUT_S,
    DEFAULT_BATCH_STALE_AFTER_S,
)

logger = logging.getLogger(__name__)


class IngestionEndpoint:
    """Route chunks into the accumulator and forward every assembled payload.

    Both paths out of the accumulator, a completing chunk and a forced flush,
    end in `deliver`, which appends to history and then broadcasts.
    """

    def __init__(
        self,
        *,
        history: BoundedHistory[HistoryEntry],
        fanout: DeliveryFanout,
        timeout_s: float = DEFAULT_BATCH_TIMEOUT_S,
        stale_after_s: float = DEFAULT_BATCH_STALE_AFTER_S,
        single_batch_id: str = SINGLE_BATCH_ID,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self.history = history
        self.fanout = fanout
        self.accumulator = BatchAccumulator(
            timeout_s=timeout_s,
            stale_after_s=stale_after_s,
            single_batch_id=single_batch_id,
            on_flush=self.deliver,
            now_fn=now_fn,
        )

    def ingest(self, chunk: Chunk) -> dict[str, Any]:
        """Submit one chunk and build its acknowledgement body.

        Raises ChunkValidationError for malformed metadata; nothing is stored then.
        """
        result = self.accumulator.submit(
            chunk.batch_id,
            chunk.index,
            chunk.total,
            chunk.payload,
            request_id=chunk.request_id,
        )

        assembled = result.assembled
        if assembled is None:
            return {
                "success": True,
                "message": f"Partial batch received ({result.progress})",
                "requestId": chunk.request_id,
                "batchId": result.batch_id,
                "itemId": chunk.item_id,
                "progress": result.progress,
                "missing": list(result.missing),
            }

        self.deliver(assembled)

        if assembled.source == SOURCE_SINGLE:
            return {
                "success": True,
                "message": "Single item received and stored",
                "requestId": chunk.request_id,
                "itemId": chunk.item_id,
                "totalItems": len(self.history),
            }
        return {
            "success": True,
            "message": "Complete batch received and stored",
            "requestId": chunk.request_id,
            "batchId": result.batch_id,
            "itemId": chunk.item_id,
            "totalItems": assembled.item_count,
            "totalStored": len(self.history),
        }

    def deliver(self, assembled: AssembledBatch) -> HistoryEntry:
        entry = self.history.append(
            HistoryEntry(
                payload=assembled.payload,
                timestamp=utc_now_iso(),
                request_id=assembled.request_id,
                source=assembled.source,
            )
        )
        consumers = self.fanout.broadcast_entry(entry)
        logger.info(
            "[%s] Stored %s items from %s (history %s/%s, pushed to %s consumers)",
            assembled.request_id,
            assembled.item_count,
            assembled.source,
            len(self.history),
            self.history.capacity,
            consumers,
        )
        return entry


__all__ = ["IngestionEndpoint"]
