"""Ordered assembly of indexed chunks into one logical payload."""

from __future__ import annotations

from typing import Any
from collections.abc import Mapping


def assemble_chunks(chunks_by_index: Mapping[int, Any], total: int) -> list[Any]:
    """Concatenate chunks by declared index, flattening list chunks one level.

    Missing indices are skipped without a placeholder.
    """
    items: list[Any] = []
    for index in range(total):
        if index not in chunks_by_index:
            continue
        chunk = chunks_by_index[index]
        if isinstance(chunk, list):
            items.extend(chunk)
        else:
            items.append(chunk)
    return items


__all__ = ["assemble_chunks"]
