"""Stored history records (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    payload: Any
    timestamp: str
    request_id: str
    source: str
    # Assigned by BoundedHistory on append.
    seq: int = -1

    def to_frame(self) -> dict[str, Any]:
        return {
            "data": self.payload,
            "timestamp": self.timestamp,
            "requestId": self.request_id,
            "source": self.source,
        }

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.seq, **self.to_frame()}


@dataclass(frozen=True, slots=True)
class Notification:
    type: str
    message: str
    timestamp: str
    competitor_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    seq: int = -1

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.seq,
            "type": self.type,
            "message": self.message,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }
        if self.competitor_name is not None:
            data["competitor_name"] = self.competitor_name
        return data


__all__ = ["HistoryEntry", "Notification"]
