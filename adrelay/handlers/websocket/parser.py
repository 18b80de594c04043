"""Control message parsing for push consumers (ping/pong/end)."""

from __future__ import annotations

import orjson

from adrelay.config.websocket import WS_KEY_TYPE

CONTROL_TYPES = frozenset({"ping", "pong", "end"})


def parse_client_message(raw: str) -> str:
    """Return the control type of an inbound frame.

    Accepts a bare word (`ping`) or a JSON object with a non-empty `type`.
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("empty message")
    if text.lower() in CONTROL_TYPES:
        return text.lower()

    try:
        msg = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ValueError("message missing non-empty 'type'")
    return msg_type.strip().lower()


__all__ = ["CONTROL_TYPES", "parse_client_message"]
