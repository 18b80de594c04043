"""Response helpers shared by the HTTP routes."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse

from adrelay.state.runtime import RuntimeDeps


def get_runtime_deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def error_response(
    status_code: int,
    message: str,
    *,
    reason_code: str | None = None,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> ORJSONResponse:
    body: dict[str, Any] = {"success": False, "error": message}
    if reason_code:
        body["reason"] = reason_code
    if request_id:
        body["requestId"] = request_id
    if details:
        body.update(details)
    return ORJSONResponse(body, status_code=status_code)


def parse_cursor(raw: str | None) -> int | None:
    """Parse a `since` query value. -1 means from the beginning; junk gives None."""
    if raw is None:
        return None
    try:
        cursor = int(raw.strip())
    except ValueError:
        return None
    return cursor if cursor >= -1 else None


__all__ = ["error_response", "get_runtime_deps", "parse_cursor"]
