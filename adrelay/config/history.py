"""Recent-history buffer configuration."""

from __future__ import annotations

ENV_HISTORY_CAPACITY = "HISTORY_CAPACITY"
ENV_NOTIFICATION_CAPACITY = "NOTIFICATION_CAPACITY"

DEFAULT_HISTORY_CAPACITY = 100
DEFAULT_NOTIFICATION_CAPACITY = 50

# Cursor value reported when a buffer holds nothing yet.
EMPTY_CURSOR = -1

__all__ = [
    "DEFAULT_HISTORY_CAPACITY",
    "DEFAULT_NOTIFICATION_CAPACITY",
    "EMPTY_CURSOR",
    "ENV_HISTORY_CAPACITY",
    "ENV_NOTIFICATION_CAPACITY",
]
