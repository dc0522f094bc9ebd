"""
"Orders changed" notifications for connected dashboards.

Every committed order mutation broadcasts one lightweight event to the
`orders` group; clients refetch what they need over HTTP. Delivery is best
effort: a missing or failing channel layer is logged, never raised.
"""

import logging
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

ORDERS_GROUP = "orders"
ORDERS_CHANGED_EVENT = "orders_changed"


def broadcast_orders_changed(order_id: Optional[int] = None, status: str = "", order_type: str = "") -> bool:
    """
    Send the orders_changed event right away.

    Returns:
        True if sent, False if there is no channel layer or sending failed
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False

    payload = {
        "type": ORDERS_CHANGED_EVENT,
        "order_id": order_id,
        "status": status,
        "order_type": order_type,
    }

    try:
        async_to_sync(channel_layer.group_send)(ORDERS_GROUP, payload)
    except Exception:
        logger.exception("Failed to broadcast orders_changed for order %s", order_id)
        return False

    logger.debug("WS -> %s: %s", ORDERS_GROUP, payload)
    return True


def notify_orders_changed(order) -> None:
    """Broadcast once the surrounding transaction commits (immediately when there is none)."""
    order_id, status, order_type = order.id, order.status, order.order_type
    transaction.on_commit(lambda: broadcast_orders_changed(order_id, status, order_type))
