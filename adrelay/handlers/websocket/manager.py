"""Push consumer WebSocket connection handling."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from adrelay.state.runtime import RuntimeDeps
from adrelay.delivery.frames import encode_frame
from adrelay.delivery.consumer import PushConsumer
from adrelay.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY

from .errors import reject_connection
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)

_BUSY_MESSAGE = "Server cannot accept new dashboard connections. Please try again later."


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    fanout = runtime_deps.fanout
    if fanout.at_capacity():
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message=_BUSY_MESSAGE,
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return

    await ws.accept()

    ws_settings = runtime_deps.settings.websocket
    consumer = PushConsumer(
        ws,
        queue_max=ws_settings.send_queue_max,
        send_timeout_s=ws_settings.send_timeout_s,
    )
    # Queue the courtesy frame and register without yielding in between, so
    # no broadcast can land before it or be skipped.
    latest = runtime_deps.ingest.history.latest()
    if latest is not None:
        consumer.offer(encode_frame(latest.to_frame()))
    if not fanout.register(consumer):
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message=_BUSY_MESSAGE,
            close_code=WS_CLOSE_BUSY_CODE,
            accepted=True,
        )
        return

    consumer.start()
    logger.info("Push consumer connected. Active: %s", fanout.get_consumer_count())
    reason = "error"
    try:
        reason = await run_message_loop(ws, consumer)
    finally:
        fanout.unregister(consumer)
        with contextlib.suppress(Exception):
            await consumer.stop()
        logger.info("Push consumer closed (%s). Active: %s", reason, fanout.get_consumer_count())


__all__ = ["handle_websocket_connection"]
