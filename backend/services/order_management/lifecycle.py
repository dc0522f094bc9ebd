"""
Core order lifecycle operations.

Every status change is a conditional UPDATE on the status the caller saw,
so two actors racing on the same order can never both win. Network work
(geocoding, routing) runs before any transaction is opened.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from common.regions import REGIONS
from orders.models import Order
from orders.state_machine import CUSTOMER_CANCELLABLE, ensure_transition, initial_status
from services.exceptions import (
    InsufficientTicketsError,
    NotFoundError,
    OrderValidationError,
    StateConflictError,
)
from services.geocoding import resolve_coordinates
from services.ledger import consume_for_order, get_balance
from services.pricing import estimate_fare
from services.proofs import DELIVERY_FOLDER, PICKUP_FOLDER, discard_proofs, save_proof_images
from realtime.notifications import notify_orders_changed
from stores.models import MenuItem, StoreAvailability

logger = logging.getLogger(__name__)


@dataclass
class OrderResult:
    """Result object for order operations."""
    order: Order
    message: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


def _order_queryset():
    return Order.objects.select_related(
        "customer", "driver", "store", "store__store_availability", "menu_item"
    )


def _compare_and_set(order: Order, expected_status: str, scope: Q = None, **changes) -> None:
    """
    UPDATE the order only if it is still in `expected_status` (and matches
    `scope`). Zero rows means someone else moved it first.
    """
    changes.setdefault("updated_at", timezone.now())
    queryset = Order.objects.filter(id=order.id, status=expected_status)
    if scope is not None:
        queryset = queryset.filter(scope)
    if queryset.update(**changes) == 0:
        raise StateConflictError("Order was changed by someone else, please refresh")
    order.refresh_from_db()


# ===================== Customer Operations =====================

def get_active_customer_order(customer) -> Optional[Order]:
    return _order_queryset().filter(
        customer=customer, status__in=Order.ACTIVE_STATUSES
    ).first()


def _validate_registered_store(payload: Dict[str, Any]):
    store_id = payload.get("store_id")
    menu_item_id = payload.get("menu_item_id")
    if not store_id or not menu_item_id or not payload.get("quantity"):
        raise OrderValidationError("store_id, menu_item_id and quantity are required")

    availability = StoreAvailability.objects.select_related("user").filter(user_id=store_id).first()
    if availability is None:
        raise OrderValidationError("Store is not available")
    if availability.status != StoreAvailability.ACTIVE:
        raise OrderValidationError("Store is currently closed")

    item = MenuItem.objects.filter(id=menu_item_id).first()
    if item is None or item.store_id != availability.user_id or not item.is_available or not item.is_active:
        raise OrderValidationError("Menu item is not available")
    return availability, item


def _validate_region(value, field_name):
    if not value:
        raise OrderValidationError(f"{field_name} is required")
    if value not in REGIONS:
        raise OrderValidationError(f"{field_name} must be one of {', '.join(REGIONS)}")


def _resolve(link: Optional[str]):
    return resolve_coordinates(link) if link else None


def create_order(customer, payload: Dict[str, Any]) -> OrderResult:
    """
    Create an order in its initial status.

    `payload` is the validated request body. Map links are geocoded and the
    fare estimated before the insert; neither can fail creation.

    Raises:
        OrderValidationError: missing or inconsistent fields
        StateConflictError: the customer already has a non-terminal order
    """
    order_type = payload.get("order_type")
    status = initial_status(order_type)

    if get_active_customer_order(customer):
        raise StateConflictError("You already have an active order")

    fields = {
        "order_type": order_type,
        "status": status,
        "customer": customer,
        "payment_method": payload.get("payment_method") or Order.CASH,
        "note": payload.get("note") or "",
        "quantity": payload.get("quantity"),
        "dropoff_address": payload.get("dropoff_address") or "",
        "dropoff_map_link": payload.get("dropoff_map_link") or None,
        "dropoff_region": payload.get("dropoff_region") or None,
    }

    origin = None
    if order_type == Order.FOOD_REGISTERED_STORE:
        availability, item = _validate_registered_store(payload)
        fields.update(store=availability.user, menu_item=item)
        fields["pickup_address"] = availability.address
        origin = availability.coordinates

    elif order_type == Order.FOOD_EXTERNAL_STORE:
        if not payload.get("external_store_name") or not payload.get("external_store_address") or not payload.get("quantity"):
            raise OrderValidationError("external_store_name, external_store_address and quantity are required")
        # declared region of the external store drives driver matching
        _validate_region(payload.get("pickup_region"), "pickup_region")
        link = payload.get("external_map_link") or None
        fields.update(
            external_store_name=payload["external_store_name"],
            external_store_address=payload["external_store_address"],
            external_map_link=link,
            pickup_address=payload["external_store_address"],
            pickup_map_link=link,
            pickup_region=payload["pickup_region"],
        )
        origin = _resolve(link)

    else:
        if not payload.get("pickup_address") or not payload.get("dropoff_address"):
            raise OrderValidationError("pickup_address and dropoff_address are required")
        _validate_region(payload.get("pickup_region"), "pickup_region")
        link = payload.get("pickup_map_link") or None
        fields.update(
            pickup_address=payload["pickup_address"],
            pickup_map_link=link,
            pickup_region=payload["pickup_region"],
        )
        origin = _resolve(link)

    if origin and order_type != Order.FOOD_REGISTERED_STORE:
        fields.update(pickup_latitude=round(origin.lat, 6), pickup_longitude=round(origin.lng, 6))

    destination = _resolve(fields["dropoff_map_link"])
    if destination:
        fields.update(dropoff_latitude=round(destination.lat, 6), dropoff_longitude=round(destination.lng, 6))

    estimate = estimate_fare(origin, destination)
    fields.update(estimated_distance_km=estimate.distance_km, estimated_fare=estimate.fare)

    try:
        with transaction.atomic():
            order = Order.objects.create(**fields)
    except IntegrityError:
        # lost the race against a concurrent create for the same customer
        raise StateConflictError("You already have an active order")

    notify_orders_changed(order)
    logger.info("Order %s created (%s) by customer %s", order.id, order_type, customer.pk)
    return OrderResult(order=order, message="Order created", extra={"estimate": estimate.as_dict()})


def cancel_by_customer(customer, order_id: int) -> OrderResult:
    order = _order_queryset().filter(id=order_id, customer=customer).first()
    if order is None:
        raise NotFoundError("Order not found")

    cancellable_status = CUSTOMER_CANCELLABLE[order.order_type]
    if order.status != cancellable_status:
        raise StateConflictError(f"Order can no longer be cancelled ({order.status})", status=order.status)
    ensure_transition(order, Order.CANCELLED)

    _compare_and_set(
        order,
        cancellable_status,
        scope=Q(customer=customer),
        status=Order.CANCELLED,
        cancel_reason=Order.REASON_CUSTOMER_CANCELLED,
        cancelled_at=timezone.now(),
    )
    notify_orders_changed(order)
    return OrderResult(order=order, message="Order cancelled")


def list_customer_orders(customer):
    return list(_order_queryset().filter(customer=customer))


def get_customer_order(customer, order_id: int) -> Order:
    order = _order_queryset().filter(id=order_id, customer=customer).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


# ===================== Store Operations =====================

def _store_order(store, order_id: int) -> Order:
    order = _order_queryset().filter(id=order_id, store=store).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


def accept_order(store, order_id: int) -> OrderResult:
    """Store confirms and starts cooking. Needs at least one ticket."""
    order = _store_order(store, order_id)
    ensure_transition(order, Order.CONFIRMED_COOKING)
    if get_balance(store) < 1:
        raise InsufficientTicketsError("Not enough tickets, please top up before accepting orders")

    _compare_and_set(
        order,
        Order.WAITING_STORE_CONFIRM,
        scope=Q(store=store),
        status=Order.CONFIRMED_COOKING,
        confirmed_at=timezone.now(),
    )
    notify_orders_changed(order)
    return OrderResult(order=order, message="Order accepted")


def reject_order(store, order_id: int, reason: str = "") -> OrderResult:
    order = _store_order(store, order_id)
    ensure_transition(order, Order.REJECTED)

    _compare_and_set(
        order,
        Order.WAITING_STORE_CONFIRM,
        scope=Q(store=store),
        status=Order.REJECTED,
        rejection_reason=(reason or "").strip() or "Rejected by store",
        cancelled_at=timezone.now(),
    )
    notify_orders_changed(order)
    return OrderResult(order=order, message="Order rejected")


def mark_ready(store, order_id: int) -> OrderResult:
    """Food is ready: open the order to drivers."""
    order = _store_order(store, order_id)
    ensure_transition(order, Order.SEARCHING_DRIVER)

    _compare_and_set(
        order,
        Order.CONFIRMED_COOKING,
        scope=Q(store=store),
        status=Order.SEARCHING_DRIVER,
    )
    notify_orders_changed(order)
    return OrderResult(order=order, message="Order is ready, searching for a driver")


def list_store_orders(store, history: bool = False):
    queryset = _order_queryset().filter(store=store)
    if not history:
        queryset = queryset.exclude(status__in=[Order.COMPLETED, Order.REJECTED, Order.CANCELLED])
    return queryset


# ===================== Driver Operations =====================

def _driver_order(driver, order_id: int) -> Order:
    order = _order_queryset().filter(id=order_id, driver=driver).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


def submit_pickup_proof(driver, order_id: int, images: Iterable) -> OrderResult:
    """Pickup evidence moves DRIVER_ASSIGNED -> ON_DELIVERY."""
    order = _driver_order(driver, order_id)
    ensure_transition(order, Order.ON_DELIVERY)

    refs = save_proof_images(images, PICKUP_FOLDER)
    try:
        _compare_and_set(
            order,
            Order.DRIVER_ASSIGNED,
            scope=Q(driver=driver),
            status=Order.ON_DELIVERY,
            pickup_proof_refs=list(order.pickup_proof_refs or []) + refs,
            picked_up_at=timezone.now(),
        )
    except StateConflictError:
        discard_proofs(refs)
        raise

    notify_orders_changed(order)
    return OrderResult(order=order, message="Pickup confirmed, order is on delivery")


def submit_delivery_proof(driver, order_id: int, images: Iterable) -> OrderResult:
    """
    Delivery evidence completes the order.

    The status change and the ticket consumption (driver, plus store for
    registered-store orders) commit together or not at all.
    """
    order = _driver_order(driver, order_id)
    ensure_transition(order, Order.COMPLETED)

    refs = save_proof_images(images, DELIVERY_FOLDER)
    try:
        with transaction.atomic():
            _compare_and_set(
                order,
                Order.ON_DELIVERY,
                scope=Q(driver=driver),
                status=Order.COMPLETED,
                delivery_proof_refs=list(order.delivery_proof_refs or []) + refs,
                completed_at=timezone.now(),
            )
            consume_for_order(order)
    except Exception:
        discard_proofs(refs)
        raise

    notify_orders_changed(order)
    logger.info("Order %s completed by driver %s", order.id, driver.pk)
    return OrderResult(order=order, message="Order completed")


def cancel_external_by_driver(driver, order_id: int, reason: str, note: str = "") -> OrderResult:
    """
    Driver gives up on an external-store order it holds. The order is
    cancelled for good; it is not put back in the queue.
    """
    valid_reasons = {value for value, _ in Order.DRIVER_CANCEL_REASONS}
    if reason not in valid_reasons:
        raise OrderValidationError("Invalid cancel reason", errors={"reason": sorted(valid_reasons)})
    note = (note or "").strip()
    if reason == Order.REASON_OTHER and not note:
        raise OrderValidationError("A note is required when the reason is OTHER")

    order = _driver_order(driver, order_id)
    if order.order_type != Order.FOOD_EXTERNAL_STORE:
        raise StateConflictError("Only external-store orders can be cancelled by the driver")
    ensure_transition(order, Order.CANCELLED)

    _compare_and_set(
        order,
        Order.DRIVER_ASSIGNED,
        scope=Q(driver=driver),
        status=Order.CANCELLED,
        cancel_reason=reason,
        cancel_note=note,
        cancelled_at=timezone.now(),
    )
    notify_orders_changed(order)
    return OrderResult(order=order, message="Order cancelled")


def get_active_driver_order(driver) -> Optional[Order]:
    return _order_queryset().filter(
        driver=driver, status__in=Order.DRIVER_ACTIVE_STATUSES
    ).first()


def list_driver_history(driver) -> List[Order]:
    return list(_order_queryset().filter(driver=driver, status__in=Order.TERMINAL_STATUSES))


def get_driver_order(driver, order_id: int) -> Order:
    """The driver's own order, or one still open for claiming."""
    order = _order_queryset().filter(
        Q(driver=driver) | Q(status=Order.SEARCHING_DRIVER, driver__isnull=True),
        id=order_id,
    ).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


# ===================== Any Party =====================

def get_order_proofs(user, order_id: int) -> Dict[str, List[str]]:
    order = Order.objects.filter(id=order_id).first()
    if order is None or not order.is_party(user):
        raise NotFoundError("Order not found")
    return {
        "pickup": list(order.pickup_proof_refs or []),
        "delivery": list(order.delivery_proof_refs or []),
    }
