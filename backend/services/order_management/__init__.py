"""
Order management service - Core order lifecycle operations.

This module handles:
    - Creating orders (geocoding + fare snapshot)
    - Customer cancellation
    - Store accept / reject / ready
    - Pickup and delivery proofs, completion with ticket consumption
    - Driver cancellation of external-store orders
    - Customer ratings of completed orders
    - Querying orders per role
"""

from .lifecycle import (
    OrderResult,
    accept_order,
    cancel_by_customer,
    cancel_external_by_driver,
    create_order,
    get_active_customer_order,
    get_active_driver_order,
    get_customer_order,
    get_driver_order,
    get_order_proofs,
    list_customer_orders,
    list_driver_history,
    list_store_orders,
    mark_ready,
    reject_order,
    submit_delivery_proof,
    submit_pickup_proof,
)
from .ratings import get_order_rating, rate_order

__all__ = [
    "OrderResult",
    "accept_order",
    "cancel_by_customer",
    "cancel_external_by_driver",
    "create_order",
    "get_active_customer_order",
    "get_active_driver_order",
    "get_customer_order",
    "get_driver_order",
    "get_order_proofs",
    "get_order_rating",
    "list_customer_orders",
    "list_driver_history",
    "list_store_orders",
    "mark_ready",
    "rate_order",
    "reject_order",
    "submit_delivery_proof",
    "submit_pickup_proof",
]
