"""Chunk metadata parsing from ingestion request headers."""

from __future__ import annotations

import time
import string
import secrets
from typing import Any
from collections.abc import Mapping

from adrelay.state.batch import Chunk
from adrelay.errors import ChunkValidationError
from adrelay.config.batching import SINGLE_BATCH_ID
from adrelay.config.http import (
    HEADER_ITEM_ID,
    HEADER_BATCH_ID,
    HEADER_REQUEST_ID,
    HEADER_BATCH_INDEX,
    HEADER_BATCH_TOTAL,
    REASON_INVALID_HEADER,
)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_request_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def _header(headers: Mapping[str, str], name: str) -> str:
    return (headers.get(name) or "").strip()


def _int_header(headers: Mapping[str, str], name: str, default: int) -> int:
    raw = _header(headers, name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ChunkValidationError(f"header {name} must be an integer (got {raw!r})", REASON_INVALID_HEADER) from exc


def parse_chunk(
    headers: Mapping[str, str],
    payload: Any,
    *,
    single_batch_id: str = SINGLE_BATCH_ID,
    request_id: str | None = None,
) -> Chunk:
    """Build a Chunk from the batch headers; absent headers take their defaults.

    Only the syntax is checked here. Range checks belong to the accumulator.
    """
    batch_id = _header(headers, HEADER_BATCH_ID) or single_batch_id
    index = _int_header(headers, HEADER_BATCH_INDEX, 0)
    total = _int_header(headers, HEADER_BATCH_TOTAL, 1)
    return Chunk(
        batch_id=batch_id,
        index=index,
        total=total,
        payload=payload,
        request_id=request_id or _header(headers, HEADER_REQUEST_ID) or generate_request_id(),
        item_id=_header(headers, HEADER_ITEM_ID) or f"{batch_id}_{index}",
    )


__all__ = ["generate_request_id", "parse_chunk"]
