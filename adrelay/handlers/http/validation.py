"""Inbound JSON body checks shared by the ingestion routes."""

from __future__ import annotations

from typing import Any

import orjson

from adrelay.errors import ChunkValidationError
from adrelay.config.http import (
    REASON_NO_DATA,
    REASON_INVALID_JSON,
    REASON_INVALID_PAYLOAD,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_MAX_PAYLOAD_DEPTH,
)


def _exceeds_depth(value: Any, max_depth: int) -> bool:
    stack: list[tuple[Any, int]] = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            return True
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        for child in children:
            if isinstance(child, (dict, list)):
                stack.append((child, depth + 1))
    return False


def decode_body(raw: bytes, *, max_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> Any:
    if not raw or not raw.strip():
        raise ChunkValidationError("No data received", REASON_NO_DATA)
    if max_bytes > 0 and len(raw) > max_bytes:
        raise ChunkValidationError("Data payload too large", REASON_INVALID_PAYLOAD)
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ChunkValidationError(f"invalid JSON: {exc}", REASON_INVALID_JSON) from exc


def validate_payload(data: Any, *, max_depth: int = DEFAULT_MAX_PAYLOAD_DEPTH) -> None:
    if data is None:
        raise ChunkValidationError("Data cannot be null", REASON_NO_DATA)
    if not isinstance(data, (dict, list)):
        raise ChunkValidationError("Data must be an object or array", REASON_INVALID_PAYLOAD)
    if _exceeds_depth(data, max_depth):
        raise ChunkValidationError("Data structure too deeply nested", REASON_INVALID_PAYLOAD)


__all__ = ["decode_body", "validate_payload"]
