"""Ingestion (POST) and pull retrieval (GET/DELETE) of analysis payloads."""

from __future__ import annotations

import math
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

from adrelay.timeutil import utc_now_iso
from adrelay.errors import RateLimitError, ChunkValidationError
from adrelay.config.http import REASON_INTERNAL, HEADER_REQUEST_ID, REASON_RATE_LIMITED

from .headers import parse_chunk, generate_request_id
from .validation import decode_body, validate_payload
from .responses import parse_cursor, error_response, get_runtime_deps

logger = logging.getLogger(__name__)

router = APIRouter()


def _client_key(request: Request) -> str | None:
    return request.client.host if request.client is not None else None


@router.post("/data")
async def post_data(request: Request) -> ORJSONResponse:
    runtime_deps = get_runtime_deps(request)
    ingest_settings = runtime_deps.settings.ingest
    request_id = (request.headers.get(HEADER_REQUEST_ID) or "").strip() or generate_request_id()

    try:
        runtime_deps.ingest_limiter.consume(_client_key(request))
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(float(exc.retry_in))))
        logger.warning("[%s] Ingest rate limited; retry in %ss", request_id, retry_in_s)
        return error_response(
            429,
            f"rate limit: at most {exc.limit} requests per {int(exc.window_seconds)} seconds; "
            f"retry in {retry_in_s} seconds",
            reason_code=REASON_RATE_LIMITED,
            request_id=request_id,
            details={"retryIn": retry_in_s},
        )

    try:
        payload = decode_body(await request.body(), max_bytes=ingest_settings.max_payload_bytes)
        validate_payload(payload, max_depth=ingest_settings.max_payload_depth)
        chunk = parse_chunk(
            request.headers,
            payload,
            single_batch_id=runtime_deps.settings.batching.single_batch_id,
            request_id=request_id,
        )
        logger.debug(
            "[%s] Chunk %s/%s of batch %s (%s)",
            request_id,
            chunk.index + 1,
            chunk.total,
            chunk.batch_id,
            "array" if isinstance(payload, list) else "object",
        )
        body = runtime_deps.ingest.ingest(chunk)
    except ChunkValidationError as exc:
        logger.warning("[%s] Rejected chunk: %s", request_id, exc.message)
        return error_response(400, exc.message, reason_code=exc.reason_code, request_id=request_id)
    except Exception as exc:
        logger.exception("[%s] POST /data failed", request_id)
        return error_response(
            500,
            str(exc) or "Failed to save data",
            reason_code=REASON_INTERNAL,
            request_id=request_id,
        )
    return ORJSONResponse(body)


@router.get("/data")
async def get_data(request: Request, since: str | None = None) -> dict[str, Any]:
    history = get_runtime_deps(request).ingest.history
    if since is None:
        entries = history.all()
        logger.debug("GET /data - returning %s items", len(entries))
        return {
            "success": True,
            "data": [entry.to_dict() for entry in entries],
            "count": len(entries),
            "timestamp": utc_now_iso(),
        }

    cursor = parse_cursor(since)
    if cursor is None:
        entries, latest_id = [], history.latest_cursor
    else:
        entries, latest_id = history.since(cursor)
    return {
        "success": True,
        "data": [entry.to_dict() for entry in entries],
        "count": len(entries),
        "latestId": latest_id,
        "timestamp": utc_now_iso(),
    }


@router.delete("/data")
async def delete_data(request: Request) -> dict[str, Any]:
    previous_count = get_runtime_deps(request).ingest.history.clear()
    logger.info("DELETE /data - cleared %s items", previous_count)
    return {
        "success": True,
        "message": "All data cleared successfully",
        "previousCount": previous_count,
        "currentCount": 0,
    }


__all__ = ["router"]
