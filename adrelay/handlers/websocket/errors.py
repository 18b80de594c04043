"""Error helpers for the push WebSocket."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from adrelay.delivery.frames import encode_frame, build_error_frame

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_close(ws: WebSocket, *, code: int, reason: str = "") -> None:
    try:
        await ws.close(code=code, reason=reason)
    except Exception:
        logger.debug("WebSocket close failed", exc_info=True)


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
    accepted: bool = False,
) -> None:
    # Accept so we can send a structured error, then close.
    if not accepted:
        try:
            await ws.accept()
        except Exception:
            return
    await safe_send_text(ws, encode_frame(build_error_frame(error_code, message)))
    await safe_close(ws, code=close_code, reason=message)


__all__ = ["reject_connection", "safe_close", "safe_send_text"]
