"""Wall-clock timestamps in the format dashboard clients parse."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now_iso() -> str:
    # e.g. 2026-10-19T09:20:31.512Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["utc_now_iso"]
