"""Liveness and operational visibility routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from .responses import get_runtime_deps

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    runtime_deps = get_runtime_deps(request)
    return {
        "status": "healthy",
        "clients": runtime_deps.fanout.get_consumer_count(),
        "uptime": round(runtime_deps.uptime_s(), 3),
        "activeBatches": [batch.to_dict() for batch in runtime_deps.ingest.accumulator.active_batches()],
    }


__all__ = ["router"]
