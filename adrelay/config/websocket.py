"""WebSocket push transport configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Push frame keys
WS_KEY_DATA = "data"
WS_KEY_TIMESTAMP = "timestamp"
WS_KEY_REQUEST_ID = "requestId"
WS_KEY_SOURCE = "source"
WS_KEY_TYPE = "type"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_GOING_AWAY_CODE = 1001
WS_CLOSE_BUSY_CODE = 4002

ENV_WS_MAX_CONSUMERS = "WS_MAX_CONSUMERS"
ENV_WS_SEND_QUEUE_MAX = "WS_SEND_QUEUE_MAX"
ENV_WS_SEND_TIMEOUT_S = "WS_SEND_TIMEOUT_S"

DEFAULT_WS_MAX_CONSUMERS = 100
DEFAULT_WS_SEND_QUEUE_MAX = 64
DEFAULT_WS_SEND_TIMEOUT_S = 10.0

# How often an idle receive loop checks whether its consumer was dropped.
WS_CONSUMER_CHECK_S = 5.0

# Errors (error.code values)
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"

__all__ = [
    "DEFAULT_WS_MAX_CONSUMERS",
    "DEFAULT_WS_SEND_QUEUE_MAX",
    "DEFAULT_WS_SEND_TIMEOUT_S",
    "ENV_WS_MAX_CONSUMERS",
    "ENV_WS_SEND_QUEUE_MAX",
    "ENV_WS_SEND_TIMEOUT_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_GOING_AWAY_CODE",
    "WS_CONSUMER_CHECK_S",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_KEY_DATA",
    "WS_KEY_REQUEST_ID",
    "WS_KEY_SOURCE",
    "WS_KEY_TIMESTAMP",
    "WS_KEY_TYPE",
]
