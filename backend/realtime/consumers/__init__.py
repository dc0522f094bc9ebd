"""Realtime consumers for WebSocket communication."""

from .base import BaseConsumer
from .orders_consumer import OrdersConsumer

__all__ = [
    "BaseConsumer",
    "OrdersConsumer",
]
