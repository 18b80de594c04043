"""Batch reassembly configuration."""

from __future__ import annotations

# Batch id that marks a chunk as "not batched": it completes on arrival.
SINGLE_BATCH_ID = "single"

ENV_BATCH_TIMEOUT_S = "BATCH_TIMEOUT_S"
ENV_BATCH_STALE_AFTER_S = "BATCH_STALE_AFTER_S"
ENV_BATCH_SWEEP_INTERVAL_S = "BATCH_SWEEP_INTERVAL_S"

DEFAULT_BATCH_TIMEOUT_S = 30.0
DEFAULT_BATCH_STALE_AFTER_S = 300.0
DEFAULT_BATCH_SWEEP_INTERVAL_S = 60.0

# Source tags attached to stored/broadcast payloads.
SOURCE_SINGLE = "single"
SOURCE_BATCH_PREFIX = "batch_"
SOURCE_INCOMPLETE_PREFIX = "incomplete_batch_"

STATUS_PARTIAL = "accepted-partial"
STATUS_COMPLETE = "accepted-complete"

__all__ = [
    "DEFAULT_BATCH_STALE_AFTER_S",
    "DEFAULT_BATCH_SWEEP_INTERVAL_S",
    "DEFAULT_BATCH_TIMEOUT_S",
    "ENV_BATCH_STALE_AFTER_S",
    "ENV_BATCH_SWEEP_INTERVAL_S",
    "ENV_BATCH_TIMEOUT_S",
    "SINGLE_BATCH_ID",
    "SOURCE_BATCH_PREFIX",
    "SOURCE_INCOMPLETE_PREFIX",
    "SOURCE_SINGLE",
    "STATUS_COMPLETE",
    "STATUS_PARTIAL",
]
