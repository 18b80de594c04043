"""Batch reassembly state (dataclasses only)."""

from __future__ import annotations

import asyncio
from typing import Any
from dataclasses import field, dataclass

from adrelay.config.batching import STATUS_COMPLETE


@dataclass(frozen=True, slots=True)
class Chunk:
    """One HTTP delivery unit, as parsed from headers and body."""

    batch_id: str
    index: int
    total: int
    payload: Any
    request_id: str
    item_id: str


@dataclass(slots=True)
class Batch:
    """In-flight chunks of one logical payload. Owned by a single accumulator."""

    id: str
    total: int
    request_id: str
    created_at: float
    last_update_at: float
    chunks_by_index: dict[int, Any] = field(default_factory=dict)
    timeout_handle: asyncio.TimerHandle | None = None

    @property
    def received(self) -> int:
        return len(self.chunks_by_index)

    def missing(self) -> list[int]:
        return [i for i in range(self.total) if i not in self.chunks_by_index]

    def is_complete(self) -> bool:
        return len(self.chunks_by_index) == self.total


@dataclass(frozen=True, slots=True)
class AssembledBatch:
    """A logical payload ready for storage and broadcast."""

    batch_id: str
    request_id: str
    payload: Any
    item_count: int
    source: str
    complete: bool = True
    missing: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class SubmitResult:
    status: str
    batch_id: str
    received: int
    total: int
    missing: tuple[int, ...] = ()
    assembled: AssembledBatch | None = None

    @property
    def complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def progress(self) -> str:
        return f"{self.received}/{self.total}"


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Read-only view of an in-flight batch for operational visibility."""

    id: str
    total: int
    received: int
    age_ms: int

    @property
    def progress(self) -> str:
        return f"{self.received}/{self.total}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "total": self.total,
            "received": self.received,
            "progress": self.progress,
            "age": self.age_ms,
        }


__all__ = ["AssembledBatch", "Batch", "BatchProgress", "Chunk", "SubmitResult"]
