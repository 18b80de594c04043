"""JSON text frames sent to push consumers."""

from __future__ import annotations

from typing import Any

import orjson

from adrelay.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_KEY_SOURCE,
    WS_KEY_TIMESTAMP,
    WS_KEY_REQUEST_ID,
)


def build_push_frame(payload: Any, *, timestamp: str, request_id: str, source: str) -> dict[str, Any]:
    return {
        WS_KEY_DATA: payload,
        WS_KEY_TIMESTAMP: timestamp,
        WS_KEY_REQUEST_ID: request_id,
        WS_KEY_SOURCE: source,
    }


def build_control_frame(msg_type: str, **fields: Any) -> dict[str, Any]:
    return {WS_KEY_TYPE: msg_type, **fields}


def build_error_frame(code: str, message: str) -> dict[str, Any]:
    return build_control_frame("error", error={"code": code, "message": message})


def encode_frame(frame: dict[str, Any]) -> str:
    return orjson.dumps(frame).decode("utf-8")


__all__ = ["build_control_frame", "build_error_frame", "build_push_frame", "encode_frame"]
