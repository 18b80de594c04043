"""Fixed-capacity FIFO buffer with monotonically increasing cursors."""

from __future__ import annotations

import dataclasses
import collections
from typing import Generic, TypeVar

from adrelay.config.history import EMPTY_CURSOR, DEFAULT_HISTORY_CAPACITY

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    """Keep the last `capacity` records, oldest first.

    Records are frozen dataclasses with a `seq` field. `append` stores a copy
    stamped with the next sequence number; that number is the cursor pull
    clients hand back to `since`. Sequence numbers start at 0 and only reset
    on `clear`.
    """

    def __init__(self, *, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        self.capacity = max(1, int(capacity))
        self._entries: collections.deque[T] = collections.deque(maxlen=self.capacity)
        self._next_seq = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def latest_cursor(self) -> int:
        return self._next_seq - 1 if self._entries else EMPTY_CURSOR

    def append(self, entry: T) -> T:
        stored = dataclasses.replace(entry, seq=self._next_seq)  # type: ignore[type-var]
        self._next_seq += 1
        # deque(maxlen=...) drops the head on overflow.
        self._entries.append(stored)
        return stored

    def all(self) -> list[T]:
        return list(self._entries)

    def latest(self) -> T | None:
        return self._entries[-1] if self._entries else None

    def since(self, cursor: int) -> tuple[list[T], int]:
        if not self._entries:
            return [], EMPTY_CURSOR
        latest = self._next_seq - 1
        if cursor > latest:
            # Cursor from before a clear(): the client has seen none of these.
            return list(self._entries), latest
        first_seq = self._next_seq - len(self._entries)
        skip = max(0, cursor - first_seq + 1)
        fresh = list(self._entries)[skip:]
        return fresh, latest

    def clear(self) -> int:
        previous = len(self._entries)
        self._entries.clear()
        self._next_seq = 0
        return previous


__all__ = ["BoundedHistory"]
