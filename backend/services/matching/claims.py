"""
Region-constrained driver matching and the atomic claim.

A claim is a single conditional UPDATE on "still SEARCHING_DRIVER and no
driver bound". Whoever's UPDATE touches the row first wins; every other
driver gets StateConflictError. The partial unique constraint on
(driver, active status) stops a driver from holding two orders.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from common.regions import matching_regions, regions_match
from drivers.models import DriverAvailability
from orders.models import DeliveryPricing, Order
from services.exceptions import (
    InsufficientTicketsError,
    NotFoundError,
    OrderValidationError,
    StateConflictError,
)
from services.ledger import get_balance
from services.pricing import estimate_fare
from stores.models import StoreAvailability
from realtime.notifications import notify_orders_changed

logger = logging.getLogger(__name__)


@dataclass
class AvailableOrder:
    order: Order
    distance_km: Optional[float] = None
    fare: Optional[int] = None


@dataclass
class AvailableOrders:
    orders: List[AvailableOrder] = field(default_factory=list)
    has_active: bool = False
    balance: int = 0
    message: str = ""


def _region_filter(region: str) -> Q:
    """Orders whose relevant region matches a driver declared in `region`."""
    regions = matching_regions(region)
    registered = Q(order_type=Order.FOOD_REGISTERED_STORE)
    store_open = Q(store__store_availability__status=StoreAvailability.ACTIVE)

    if regions is None:
        # wildcard driver: any region, still only open stores
        return (registered & store_open) | ~registered

    return (
        (registered & store_open & Q(store__store_availability__region__in=regions))
        | (~registered & Q(pickup_region__in=regions))
    )


def list_available_orders(driver) -> AvailableOrders:
    """
    Open orders this driver may claim, newest first, each enriched with a
    distance/fare estimate when both ends have coordinates.

    Raises:
        OrderValidationError: the driver has not declared a region yet
    """
    availability = DriverAvailability.objects.filter(user=driver).first()
    if availability is None or not availability.region:
        raise OrderValidationError("Set your service region before looking for orders")

    has_active = Order.objects.filter(
        driver=driver, status__in=Order.ACTIVE_STATUSES
    ).exists()
    balance = get_balance(driver)

    if not availability.is_active:
        return AvailableOrders(
            has_active=has_active,
            balance=balance,
            message="You are inactive; switch to ACTIVE to see available orders",
        )

    open_orders = (
        Order.objects.filter(status=Order.SEARCHING_DRIVER, driver__isnull=True)
        .filter(_region_filter(availability.region))
        .select_related("customer", "store", "store__store_availability", "menu_item")
        .order_by("-created_at", "-id")
    )

    pricing = DeliveryPricing.current()
    results = []
    for order in open_orders:
        origin, destination = order.pickup_coordinates, order.dropoff_coordinates
        if origin and destination:
            estimate = estimate_fare(origin, destination, pricing=pricing)
            results.append(AvailableOrder(order=order, distance_km=estimate.distance_km, fare=estimate.fare))
        else:
            results.append(AvailableOrder(order=order))

    return AvailableOrders(orders=results, has_active=has_active, balance=balance)


def claim_order(driver, order_id: int) -> Order:
    """
    Bind an open order to `driver`.

    Checked in order: ticket balance, order still open, region match.
    No ticket is spent here; that happens at completion.

    Raises:
        InsufficientTicketsError: balance below 1
        NotFoundError: no such order
        StateConflictError: order taken, not open, region mismatch, or the
            driver already holds an active order
    """
    if get_balance(driver) < 1:
        raise InsufficientTicketsError("Not enough tickets, please top up before claiming orders")

    order = Order.objects.select_related("store", "store__store_availability").filter(id=order_id).first()
    if order is None:
        raise NotFoundError("Order not found")
    if order.status != Order.SEARCHING_DRIVER or order.driver_id is not None:
        raise StateConflictError("Order is no longer available", status=order.status)

    availability = DriverAvailability.objects.filter(user=driver).first()
    if availability is None or not regions_match(availability.region, order.relevant_region):
        raise StateConflictError("Order is outside your service region")

    now = timezone.now()
    try:
        with transaction.atomic():
            claimed = Order.objects.filter(
                id=order.id, status=Order.SEARCHING_DRIVER, driver__isnull=True
            ).update(
                driver=driver,
                status=Order.DRIVER_ASSIGNED,
                assigned_at=now,
                updated_at=now,
            )
    except IntegrityError:
        raise StateConflictError("You already have an active order")

    if claimed == 0:
        logger.info("Driver %s lost the claim race for order %s", driver.pk, order.id)
        raise StateConflictError("Order was just taken by another driver")

    order.refresh_from_db()
    notify_orders_changed(order)
    logger.info("Order %s claimed by driver %s", order.id, driver.pk)
    return order
