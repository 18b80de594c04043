"""Shared error types for the relay server."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


@dataclass(slots=True, eq=False)
class ChunkValidationError(ValueError):
    """Raised when a chunk cannot be accepted; no batch state is touched."""

    message: str
    reason_code: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True, eq=False)
class NotificationError(ValueError):
    """Raised when a notification body is unusable."""

    message: str

    def __str__(self) -> str:
        return self.message


__all__ = ["ChunkValidationError", "NotificationError", "RateLimitError"]
