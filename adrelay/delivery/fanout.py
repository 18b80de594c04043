"""Fire-and-forget broadcast of assembled payloads to live push consumers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from adrelay.timeutil import utc_now_iso
from adrelay.state.history import HistoryEntry
from adrelay.config.websocket import DEFAULT_WS_MAX_CONSUMERS

from .consumer import PushConsumer
from .frames import encode_frame, build_push_frame

logger = logging.getLogger(__name__)


class DeliveryFanout:
    """Own the live-consumer set and hand each broadcast to every member once.

    Consumers are anything with `offer(text) -> bool`; `PushConsumer` is the
    WebSocket-backed one. A consumer that refuses or raises is dropped and
    the broadcast carries on with the rest.
    """

    def __init__(self, *, max_consumers: int = DEFAULT_WS_MAX_CONSUMERS) -> None:
        self._max = max(1, int(max_consumers))
        self._consumers: dict[int, Any] = {}

    def __contains__(self, consumer: object) -> bool:
        return id(consumer) in self._consumers

    def register(self, consumer: Any) -> bool:
        """Admit `consumer`. Returns False only when at capacity."""
        key = id(consumer)
        if key in self._consumers:
            return True
        if len(self._consumers) >= self._max:
            return False
        self._consumers[key] = consumer
        if isinstance(consumer, PushConsumer):
            consumer.set_on_dead(self.unregister)
        return True

    def unregister(self, consumer: Any) -> None:
        if self._consumers.pop(id(consumer), None) is not None:
            logger.debug("Push consumer removed. Active: %s", len(self._consumers))

    def get_consumer_count(self) -> int:
        return len(self._consumers)

    def at_capacity(self) -> bool:
        return len(self._consumers) >= self._max

    def broadcast(
        self,
        payload: Any,
        *,
        request_id: str,
        source: str,
        timestamp: str | None = None,
    ) -> int:
        """Queue one frame for every live consumer; returns how many accepted it."""
        frame = build_push_frame(
            payload,
            timestamp=timestamp or utc_now_iso(),
            request_id=request_id,
            source=source,
        )
        text = encode_frame(frame)

        delivered = 0
        for consumer in list(self._consumers.values()):
            try:
                accepted = bool(consumer.offer(text))
            except Exception:
                logger.debug("Push consumer rejected frame", exc_info=True)
                accepted = False
            if accepted:
                delivered += 1
            else:
                self.unregister(consumer)
        logger.debug("[%s] Broadcast %s to %s consumers", request_id, source, delivered)
        return delivered

    def broadcast_entry(self, entry: HistoryEntry) -> int:
        return self.broadcast(
            entry.payload,
            request_id=entry.request_id,
            source=entry.source,
            timestamp=entry.timestamp,
        )

    async def wait_idle(self) -> None:
        """Wait until every live consumer drained its backlog."""
        joins = [c.join() for c in self._consumers.values() if hasattr(c, "join")]
        if joins:
            await asyncio.gather(*joins)

    async def close(self) -> None:
        consumers = list(self._consumers.values())
        self._consumers.clear()
        for consumer in consumers:
            stop = getattr(consumer, "stop", None)
            if stop is None:
                continue
            try:
                await stop()
            except Exception:
                logger.debug("Push consumer stop failed", exc_info=True)


__all__ = ["DeliveryFanout"]
