"""
Ticket ledger operations.

Every balance change is paired with exactly one TicketTransaction written in
the same atomic block. The log is append-only; the balance row is a cache of
its sum, which reconcile_balances() can verify.
"""

import logging
from dataclasses import dataclass
from typing import List

from django.conf import settings
from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from accounts.models import User
from orders.models import Order
from services.exceptions import NotFoundError, OrderValidationError
from tickets.models import TicketBalance, TicketOrder, TicketTransaction

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 20


@dataclass
class BalanceMismatch:
    user_id: int
    balance: int
    ledger_total: int


def get_balance(user) -> int:
    row = TicketBalance.objects.filter(user=user).values_list("balance", flat=True).first()
    return row or 0


def recent_transactions(user, limit: int = RECENT_TRANSACTIONS):
    return list(TicketTransaction.objects.filter(user=user).order_by("-created_at", "-id")[:limit])


def _apply(user, amount: int, tx_type: str, description: str = "", reference_id: str = "") -> int:
    """Change the balance by `amount` and log it. Must run inside transaction.atomic."""
    balance, _ = TicketBalance.objects.select_for_update().get_or_create(user=user)
    TicketBalance.objects.filter(pk=balance.pk).update(balance=F("balance") + amount)
    TicketTransaction.objects.create(
        user=user,
        type=tx_type,
        amount=amount,
        description=description,
        reference_id=str(reference_id or ""),
    )
    balance.refresh_from_db(fields=["balance"])
    return balance.balance


@transaction.atomic
def grant(user, amount: int, description: str = "Grant", reference_id: str = "") -> int:
    if amount <= 0:
        raise OrderValidationError("Grant amount must be positive")
    new_balance = _apply(user, amount, TicketTransaction.GRANT, description, reference_id)
    logger.info("Granted %d tickets to user %s (balance=%d)", amount, user.pk, new_balance)
    return new_balance


@transaction.atomic
def adjust(user, amount: int, description: str = "Manual adjustment") -> int:
    if amount == 0:
        raise OrderValidationError("Adjustment amount must not be zero")
    return _apply(user, amount, TicketTransaction.ADJUSTMENT, description)


def create_ticket_order(user, quantity: int) -> TicketOrder:
    minimum = getattr(settings, "TICKET_MIN_PURCHASE", 5)
    if quantity is None or int(quantity) < minimum:
        raise OrderValidationError(f"Minimum purchase is {minimum} tickets")
    quantity = int(quantity)
    price = getattr(settings, "TICKET_PRICE", 1000)
    total = quantity * price
    return TicketOrder.objects.create(
        user=user,
        quantity=quantity,
        price_per_ticket=price,
        total_amount=total,
        payment_method="QRIS",
        payment_payload=f"QRIS|TOTAL={total}|USER={user.pk}|AT={int(timezone.now().timestamp())}",
    )


@transaction.atomic
def purchase(ticket_order_id: int) -> TicketOrder:
    """
    Mark a ticket order PAID and credit its quantity.

    Idempotent: an order already PAID is returned unchanged and credits nothing.
    """
    try:
        ticket_order = TicketOrder.objects.select_for_update().get(id=ticket_order_id)
    except TicketOrder.DoesNotExist:
        raise NotFoundError("Ticket order not found")

    if ticket_order.status == TicketOrder.PAID:
        return ticket_order
    if ticket_order.status != TicketOrder.PENDING:
        raise OrderValidationError(f"Ticket order is {ticket_order.status}")

    updated = TicketOrder.objects.filter(id=ticket_order.id, status=TicketOrder.PENDING).update(
        status=TicketOrder.PAID, paid_at=timezone.now()
    )
    if updated:
        _apply(
            ticket_order.user,
            ticket_order.quantity,
            TicketTransaction.PURCHASE,
            f"Ticket order {ticket_order.id} paid",
            ticket_order.id,
        )
    ticket_order.refresh_from_db()
    return ticket_order


def consume_for_order(order: Order) -> None:
    """
    Spend the completion tickets for `order`: one from the driver and, for
    registered-store orders, one from the store. Balances may go negative.

    Called inside the completion transaction; does not open its own.
    """
    reference = order.id
    _apply(order.driver, -1, TicketTransaction.CONSUME, f"Order {order.id} completed", reference)
    if order.order_type == Order.FOOD_REGISTERED_STORE and order.store_id:
        _apply(order.store, -1, TicketTransaction.CONSUME, f"Order {order.id} completed", reference)


def reconcile_balances() -> List[BalanceMismatch]:
    """Compare each cached balance with the sum of its transaction log."""
    totals = dict(
        TicketTransaction.objects.values("user_id")
        .annotate(total=Sum("amount"))
        .values_list("user_id", "total")
    )
    mismatches = []
    seen = set()
    for user_id, balance in TicketBalance.objects.values_list("user_id", "balance"):
        seen.add(user_id)
        total = totals.get(user_id) or 0
        if total != balance:
            mismatches.append(BalanceMismatch(user_id=user_id, balance=balance, ledger_total=total))
    for user_id, total in totals.items():
        if user_id not in seen and total:
            mismatches.append(BalanceMismatch(user_id=user_id, balance=0, ledger_total=total))

    if mismatches:
        logger.warning("Ticket reconciliation found %d mismatched balances", len(mismatches))
    return mismatches


def balance_for_user_id(user_id: int) -> dict:
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return {
        "user_id": user.id,
        "balance": get_balance(user),
        "transactions": recent_transactions(user),
    }


@transaction.atomic
def repair_balances(mismatches: List[BalanceMismatch]) -> int:
    """Reset cached balances to their ledger totals. The log is never touched."""
    for mismatch in mismatches:
        TicketBalance.objects.update_or_create(
            user_id=mismatch.user_id, defaults={"balance": mismatch.ledger_total}
        )
    return len(mismatches)
