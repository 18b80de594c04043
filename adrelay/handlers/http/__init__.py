"""HTTP routes: ingestion, pull retrieval, notifications and health."""

from .data import router as data_router
from .health import router as health_router
from .notifications import router as notifications_router

__all__ = ["data_router", "health_router", "notifications_router"]
