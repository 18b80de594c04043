"""Configuration module exports (env names, defaults and protocol constants only)."""

from .batching import SINGLE_BATCH_ID
from .websocket import WS_ENDPOINT_PATH

__all__ = [
    "SINGLE_BATCH_ID",
    "WS_ENDPOINT_PATH",
]
