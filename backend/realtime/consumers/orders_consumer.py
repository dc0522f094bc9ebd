"""Dashboard consumer: forwards orders_changed events to every signed-in client."""

from .base import BaseConsumer
from ..notifications import ORDERS_GROUP


class OrdersConsumer(BaseConsumer):
    groups_to_join = [ORDERS_GROUP]

    async def orders_changed(self, event):
        """Clients refetch over HTTP; the event only says what moved."""
        await self.send_json({
            "type": "orders_changed",
            "order_id": event.get("order_id"),
            "status": event.get("status"),
            "order_type": event.get("order_type"),
        })
