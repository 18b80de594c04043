"""Logging initialization."""

from __future__ import annotations

import os
import logging

from adrelay.config.logging import LOG_LEVEL, LOG_FORMAT, ENV_SHOW_ACCESS_LOGS


def configure_logging() -> None:
    # One line per request is noisy under batch bursts. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_ACCESS_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
