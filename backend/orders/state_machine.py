"""
Order state machine.

The single source of truth for which status an order starts in and which
forward moves are allowed per order type. Terminal statuses have no outgoing
edges. Writers still guard every move with a conditional UPDATE on the
expected status, this table only decides whether a move is legal at all.
"""

from typing import Dict, Set

from orders.models import Order
from services.exceptions import OrderValidationError, StateConflictError

_DRIVER_LEG = {
    Order.SEARCHING_DRIVER: {Order.DRIVER_ASSIGNED, Order.CANCELLED},
    Order.DRIVER_ASSIGNED: {Order.ON_DELIVERY},
    Order.ON_DELIVERY: {Order.COMPLETED},
}

TRANSITIONS: Dict[str, Dict[str, Set[str]]] = {
    Order.FOOD_REGISTERED_STORE: {
        Order.WAITING_STORE_CONFIRM: {Order.CONFIRMED_COOKING, Order.REJECTED, Order.CANCELLED},
        Order.CONFIRMED_COOKING: {Order.SEARCHING_DRIVER},
        Order.SEARCHING_DRIVER: {Order.DRIVER_ASSIGNED},
        Order.DRIVER_ASSIGNED: {Order.ON_DELIVERY},
        Order.ON_DELIVERY: {Order.COMPLETED},
    },
    Order.FOOD_EXTERNAL_STORE: {
        **_DRIVER_LEG,
        # driver may give up on an external store it could not buy from
        Order.DRIVER_ASSIGNED: {Order.ON_DELIVERY, Order.CANCELLED},
    },
    Order.RIDE: dict(_DRIVER_LEG),
}

# Status in which the customer may still cancel
CUSTOMER_CANCELLABLE = {
    Order.FOOD_REGISTERED_STORE: Order.WAITING_STORE_CONFIRM,
    Order.FOOD_EXTERNAL_STORE: Order.SEARCHING_DRIVER,
    Order.RIDE: Order.SEARCHING_DRIVER,
}


def initial_status(order_type: str) -> str:
    if order_type == Order.FOOD_REGISTERED_STORE:
        return Order.WAITING_STORE_CONFIRM
    if order_type in (Order.FOOD_EXTERNAL_STORE, Order.RIDE):
        return Order.SEARCHING_DRIVER
    raise OrderValidationError(f"Unknown order type: {order_type}")


def can_transition(order_type: str, current: str, target: str) -> bool:
    return target in TRANSITIONS.get(order_type, {}).get(current, set())


def ensure_transition(order: Order, target: str) -> None:
    """Raise StateConflictError unless `order` may move to `target` from its current status."""
    if not can_transition(order.order_type, order.status, target):
        raise StateConflictError(
            f"Order cannot move from {order.status} to {target}",
            status=order.status,
        )
