"""Celery tasks for ticket ledger maintenance."""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def reconcile_ticket_balances_task(fix: bool = False):
    """
    Compare cached ticket balances with their transaction logs.

    Scheduled daily through CELERY_BEAT_SCHEDULE. Returns the number of
    mismatched balances found.
    """
    from services.ledger import reconcile_balances, repair_balances

    mismatches = reconcile_balances()
    for mismatch in mismatches:
        logger.warning(
            "Ticket balance mismatch for user %s: balance=%s ledger=%s",
            mismatch.user_id, mismatch.balance, mismatch.ledger_total,
        )
    if fix and mismatches:
        repair_balances(mismatches)
        logger.info("Repaired %d ticket balances", len(mismatches))
    return len(mismatches)
