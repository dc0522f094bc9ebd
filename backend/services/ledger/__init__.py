"""
Ticket ledger service.

This module handles:
    - Balance lookups and recent history
    - Grants, admin adjustments and paid ticket orders
    - Completion consumption (driver, plus store for registered-store orders)
    - Balance reconciliation against the transaction log
"""

from .ledger import (
    BalanceMismatch,
    adjust,
    balance_for_user_id,
    consume_for_order,
    create_ticket_order,
    get_balance,
    grant,
    purchase,
    recent_transactions,
    reconcile_balances,
    repair_balances,
)

__all__ = [
    "BalanceMismatch",
    "adjust",
    "balance_for_user_id",
    "consume_for_order",
    "create_ticket_order",
    "get_balance",
    "grant",
    "purchase",
    "recent_transactions",
    "reconcile_balances",
    "repair_balances",
]
