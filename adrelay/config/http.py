"""HTTP ingestion protocol: header names, payload ceilings and notification rules."""

from __future__ import annotations

API_PREFIX = "/api"

# Chunk metadata headers (all optional)
HEADER_REQUEST_ID = "x-request-id"
HEADER_BATCH_ID = "x-batch-id"
HEADER_BATCH_INDEX = "x-batch-index"
HEADER_BATCH_TOTAL = "x-batch-total"
HEADER_ITEM_ID = "x-item-id"

UNKNOWN_REQUEST_ID = "unknown"

ENV_MAX_PAYLOAD_BYTES = "MAX_PAYLOAD_BYTES"
ENV_MAX_PAYLOAD_DEPTH = "MAX_PAYLOAD_DEPTH"

# Slightly under the 10MB body limit the pipeline is configured with.
DEFAULT_MAX_PAYLOAD_BYTES = 9 * 1024 * 1024
DEFAULT_MAX_PAYLOAD_DEPTH = 10

MAX_NOTIFICATION_METADATA_BYTES = 100 * 1024

# Notification types that the error feed reports besides "*error*".
ERROR_NOTIFICATION_TYPES = frozenset({"ai_credits", "rate_limit", "timeout"})

# Reason codes (error body "reason")
REASON_NO_DATA = "no_data"
REASON_INVALID_JSON = "invalid_json"
REASON_INVALID_PAYLOAD = "invalid_payload"
REASON_INVALID_HEADER = "invalid_header"
REASON_INDEX_OUT_OF_RANGE = "index_out_of_range"
REASON_TOTAL_MISMATCH = "total_mismatch"
REASON_RATE_LIMITED = "rate_limited"
REASON_INVALID_NOTIFICATION = "invalid_notification"
REASON_INTERNAL = "internal_error"

__all__ = [
    "API_PREFIX",
    "DEFAULT_MAX_PAYLOAD_BYTES",
    "DEFAULT_MAX_PAYLOAD_DEPTH",
    "ENV_MAX_PAYLOAD_BYTES",
    "ENV_MAX_PAYLOAD_DEPTH",
    "ERROR_NOTIFICATION_TYPES",
    "HEADER_BATCH_ID",
    "HEADER_BATCH_INDEX",
    "HEADER_BATCH_TOTAL",
    "HEADER_ITEM_ID",
    "HEADER_REQUEST_ID",
    "MAX_NOTIFICATION_METADATA_BYTES",
    "REASON_INDEX_OUT_OF_RANGE",
    "REASON_INTERNAL",
    "REASON_INVALID_HEADER",
    "REASON_INVALID_JSON",
    "REASON_INVALID_NOTIFICATION",
    "REASON_INVALID_PAYLOAD",
    "REASON_NO_DATA",
    "REASON_RATE_LIMITED",
    "REASON_TOTAL_MISMATCH",
    "UNKNOWN_REQUEST_ID",
]
