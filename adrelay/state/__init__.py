from .runtime import RuntimeDeps
from .settings import AppSettings
from .history import HistoryEntry, Notification
from .batch import Batch, Chunk, BatchProgress, SubmitResult, AssembledBatch

__all__ = [
    "AppSettings",
    "AssembledBatch",
    "Batch",
    "BatchProgress",
    "Chunk",
    "HistoryEntry",
    "Notification",
    "RuntimeDeps",
    "SubmitResult",
]
