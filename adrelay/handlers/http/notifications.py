"""Pipeline status notifications and the error feed derived from them."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

from adrelay.timeutil import utc_now_iso
from adrelay.errors import NotificationError
from adrelay.state.history import Notification
from adrelay.config.http import (
    REASON_INTERNAL,
    ERROR_NOTIFICATION_TYPES,
    REASON_INVALID_NOTIFICATION,
    MAX_NOTIFICATION_METADATA_BYTES,
)

from .responses import parse_cursor, error_response, get_runtime_deps

logger = logging.getLogger(__name__)

router = APIRouter()

_COMPLETION_WORDS = ("finished", "complete", "done")


def infer_notification_type(message: str) -> str:
    """Guess a notification type from free-text status messages."""
    text = message.lower()
    if any(word in text for word in _COMPLETION_WORDS):
        if "text" in text or "textual" in text:
            return "text_analysis_complete"
        if "video" in text or "visual" in text:
            return "video_analysis_complete"
        if "all" in text:
            return "all_complete"
        return "analysis_started"
    if "text" in text:
        return "text_analysis_starting"
    if "video" in text or "visual" in text:
        return "video_analysis_starting"
    return "analysis_started"


def is_error_notification(notification: Notification) -> bool:
    return "error" in notification.type or notification.type in ERROR_NOTIFICATION_TYPES


def build_notification(body: Any) -> Notification:
    if not isinstance(body, dict):
        raise NotificationError("Request body must be a JSON object")

    message = body.get("message")
    msg_type = body.get("type")
    if not msg_type and isinstance(message, str) and message:
        msg_type = infer_notification_type(message)
    if not isinstance(msg_type, str) or not msg_type:
        raise NotificationError("Invalid notification type - provide either type or message field")

    metadata = body.get("metadata")
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise NotificationError("Metadata must be an object")
    if len(orjson.dumps(metadata)) > MAX_NOTIFICATION_METADATA_BYTES:
        raise NotificationError("Metadata payload too large (max 100KB)")

    competitor_name = body.get("competitor_name")
    return Notification(
        type=msg_type,
        message=message if isinstance(message, str) else str(message or ""),
        timestamp=utc_now_iso(),
        competitor_name=competitor_name if isinstance(competitor_name, str) else None,
        metadata=metadata,
    )


@router.post("/notification")
async def post_notification(request: Request) -> ORJSONResponse:
    notifications = get_runtime_deps(request).notifications
    try:
        body = orjson.loads(await request.body())
    except orjson.JSONDecodeError:
        return error_response(400, "Request body must be a JSON object", reason_code=REASON_INVALID_NOTIFICATION)

    try:
        stored = notifications.append(build_notification(body))
    except NotificationError as exc:
        return error_response(400, exc.message, reason_code=REASON_INVALID_NOTIFICATION)
    except Exception:
        logger.exception("POST /notification failed")
        return error_response(500, "Failed to create notification", reason_code=REASON_INTERNAL)

    logger.info("NOTIFICATION: [%s] %s", stored.type, stored.message or "No message")
    return ORJSONResponse({"success": True, "notification": stored.to_dict()})


@router.get("/notifications")
async def get_notifications(request: Request, since: str | None = None) -> dict[str, Any]:
    notifications = get_runtime_deps(request).notifications
    if since is None:
        selected = notifications.all()
    else:
        cursor = parse_cursor(since)
        selected = [] if cursor is None else notifications.since(cursor)[0]
    return {
        "success": True,
        "notifications": [n.to_dict() for n in selected],
        "count": len(selected),
        "latestId": notifications.latest_cursor,
    }


@router.delete("/notifications")
async def delete_notifications(request: Request) -> dict[str, Any]:
    previous_count = get_runtime_deps(request).notifications.clear()
    logger.info("DELETE /notifications - cleared %s notifications", previous_count)
    return {
        "success": True,
        "message": "All notifications cleared",
        "previousCount": previous_count,
    }


@router.get("/errors")
async def get_errors(request: Request, since: str | None = None) -> dict[str, Any]:
    notifications = get_runtime_deps(request).notifications
    if since is None:
        candidates = notifications.all()
    else:
        cursor = parse_cursor(since)
        candidates = [] if cursor is None else notifications.since(cursor)[0]
    errors = [n for n in candidates if is_error_notification(n)]
    return {
        "success": True,
        "errors": [n.to_dict() for n in errors],
        "count": len(errors),
        "latestId": notifications.latest_cursor,
    }


__all__ = ["build_notification", "infer_notification_type", "is_error_notification", "router"]
