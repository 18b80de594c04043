from .buffer import BoundedHistory

__all__ = ["BoundedHistory"]
