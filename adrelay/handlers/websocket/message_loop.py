"""Receive loop for a push consumer socket (control messages only)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from adrelay.delivery.consumer import PushConsumer
from adrelay.delivery.frames import encode_frame, build_error_frame, build_control_frame
from adrelay.config.websocket import (
    WS_CONSUMER_CHECK_S,
    WS_CLOSE_GOING_AWAY_CODE,
    WS_ERROR_INVALID_MESSAGE,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .errors import safe_close
from .parser import parse_client_message

logger = logging.getLogger(__name__)


async def _recv_with_watchdog(ws: WebSocket, check_s: float) -> dict[str, Any] | None:
    try:
        return await asyncio.wait_for(ws.receive(), timeout=check_s)
    except TimeoutError:
        return None


def _handle_text(consumer: PushConsumer, raw: str) -> bool:
    """Answer one inbound frame. Returns False when the client asked to end."""
    try:
        msg_type = parse_client_message(raw)
    except ValueError as exc:
        consumer.offer(encode_frame(build_error_frame(WS_ERROR_INVALID_MESSAGE, str(exc))))
        return True

    if msg_type == "ping":
        consumer.offer(encode_frame(build_control_frame("pong")))
    elif msg_type == "end":
        return False
    elif msg_type != "pong":
        consumer.offer(
            encode_frame(
                build_error_frame(WS_ERROR_INVALID_MESSAGE, f"message type '{msg_type}' is not supported")
            )
        )
    return True


async def run_message_loop(ws: WebSocket, consumer: PushConsumer, *, check_s: float = WS_CONSUMER_CHECK_S) -> str:
    """Serve one socket until the client leaves or its consumer is dropped.

    Returns a short reason for logging.
    """
    while True:
        message = await _recv_with_watchdog(ws, check_s)
        if not consumer.alive:
            await safe_close(ws, code=WS_CLOSE_GOING_AWAY_CODE, reason="consumer dropped")
            return "dropped"
        if message is None:
            continue
        if message.get("type") == "websocket.disconnect":
            return "disconnected"

        text = message.get("text")
        if text is None:
            logger.debug("Ignoring binary frame from push consumer")
            continue
        if not _handle_text(consumer, text):
            await consumer.join()
            await safe_close(ws, code=WS_CLOSE_CLIENT_REQUEST_CODE)
            return "ended"


__all__ = ["run_message_loop"]
