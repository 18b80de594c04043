"""Ingest rate limit configuration."""

from __future__ import annotations

ENV_INGEST_MAX_REQUESTS_PER_WINDOW = "INGEST_MAX_REQUESTS_PER_WINDOW"
ENV_INGEST_WINDOW_SECONDS = "INGEST_WINDOW_SECONDS"

# Disabled by default: the automation pipeline bursts whole batches at once.
DEFAULT_INGEST_MAX_REQUESTS_PER_WINDOW = 0
DEFAULT_INGEST_WINDOW_SECONDS = 60.0

__all__ = [
    "DEFAULT_INGEST_MAX_REQUESTS_PER_WINDOW",
    "DEFAULT_INGEST_WINDOW_SECONDS",
    "ENV_INGEST_MAX_REQUESTS_PER_WINDOW",
    "ENV_INGEST_WINDOW_SECONDS",
]
