"""One live push consumer: a bounded outbound queue drained by its own writer task."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from adrelay.config.websocket import DEFAULT_WS_SEND_QUEUE_MAX, DEFAULT_WS_SEND_TIMEOUT_S

logger = logging.getLogger(__name__)


class PushConsumer:
    """Serialize sends to one socket without letting it stall anyone else.

    `offer` never awaits. Frames reach the socket in offer order. A full
    backlog, a failed send or a send slower than `send_timeout_s` marks the
    consumer dead and fires `on_dead` once.
    """

    def __init__(
        self,
        websocket: Any,
        *,
        queue_max: int = DEFAULT_WS_SEND_QUEUE_MAX,
        send_timeout_s: float = DEFAULT_WS_SEND_TIMEOUT_S,
        on_dead: Callable[[PushConsumer], None] | None = None,
    ) -> None:
        self._ws = websocket
        self._send_timeout_s = float(send_timeout_s)
        self._on_dead = on_dead
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max(1, int(queue_max)))
        self._dead = False
        self._task: asyncio.Task | None = None

    @property
    def alive(self) -> bool:
        return not self._dead

    @property
    def backlog(self) -> int:
        return self._queue.qsize()

    def set_on_dead(self, on_dead: Callable[[PushConsumer], None] | None) -> None:
        self._on_dead = on_dead

    def offer(self, text: str) -> bool:
        if self._dead:
            return False
        try:
            self._queue.put_nowait(text)
        except asyncio.QueueFull:
            logger.debug("Push consumer backlog full (%s frames); dropping consumer", self._queue.maxsize)
            self._mark_dead()
            return False
        return True

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._writer_loop())
        return self._task

    async def join(self) -> None:
        """Wait until every offered frame was sent or discarded."""
        await self._queue.join()

    async def stop(self) -> None:
        self._dead = True
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(Exception, asyncio.CancelledError):
                await self._task
            self._task = None
        self._discard_backlog()

    async def _writer_loop(self) -> None:
        timeout = self._send_timeout_s if self._send_timeout_s > 0 else None
        try:
            while True:
                text = await self._queue.get()
                try:
                    await asyncio.wait_for(self._ws.send_text(text), timeout=timeout)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.debug("Push consumer send failed; dropping consumer", exc_info=True)
                    self._mark_dead()
                    return
                finally:
                    self._queue.task_done()
        except asyncio.CancelledError:
            return
        finally:
            self._discard_backlog()

    def _mark_dead(self) -> None:
        if self._dead:
            return
        self._dead = True
        if self._on_dead is not None:
            try:
                self._on_dead(self)
            except Exception:
                logger.debug("on_dead callback failed", exc_info=True)

    def _discard_backlog(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()


__all__ = ["PushConsumer"]
