from .fanout import DeliveryFanout
from .consumer import PushConsumer

__all__ = ["DeliveryFanout", "PushConsumer"]
