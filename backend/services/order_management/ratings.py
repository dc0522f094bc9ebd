"""Post-completion ratings. A rating references a terminal order and never alters it."""

import logging
from typing import Optional

from django.db import IntegrityError, transaction

from orders.models import Order, OrderRating
from realtime.notifications import notify_orders_changed
from services.exceptions import NotFoundError, OrderValidationError, StateConflictError

logger = logging.getLogger(__name__)

RATING_RANGE = range(1, 6)


def _validate_score(value, field_name: str) -> int:
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise OrderValidationError(f"{field_name} must be a number from 1 to 5")
    if score not in RATING_RANGE:
        raise OrderValidationError(f"{field_name} must be a number from 1 to 5")
    return score


def rate_order(customer, order_id: int, driver_rating, store_rating=None) -> OrderRating:
    """
    Rate the driver (and the store for registered-store orders) of a completed order.

    Only the ordering customer may rate, only once, and only after completion.
    A store rating on an order without a registered store is dropped.
    """
    driver_score = _validate_score(driver_rating, "driver_rating")
    store_score: Optional[int] = None
    if store_rating not in (None, ""):
        store_score = _validate_score(store_rating, "store_rating")

    order = Order.objects.filter(id=order_id, customer=customer).first()
    if order is None:
        raise NotFoundError("Order not found")
    if order.status != Order.COMPLETED:
        raise StateConflictError("Orders can only be rated once completed")
    if OrderRating.objects.filter(order=order).exists():
        raise StateConflictError("This order has already been rated")

    if order.order_type != Order.FOOD_REGISTERED_STORE:
        store_score = None

    try:
        with transaction.atomic():
            rating = OrderRating.objects.create(
                order=order,
                customer=customer,
                driver_id=order.driver_id,
                store_id=order.store_id,
                driver_rating=driver_score,
                store_rating=store_score,
            )
    except IntegrityError:
        # a concurrent submission got there first
        raise StateConflictError("This order has already been rated")

    notify_orders_changed(order)
    logger.info("Order %s rated %s by customer %s", order.id, driver_score, customer.pk)
    return rating


def get_order_rating(customer, order_id: int) -> Optional[OrderRating]:
    if not Order.objects.filter(id=order_id, customer=customer).exists():
        raise NotFoundError("Order not found")
    return OrderRating.objects.filter(order_id=order_id).first()
