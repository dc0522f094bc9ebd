"""Transaction reports (disputes) filed by the parties of an order."""

import logging

from django.conf import settings
from django.db import transaction

from orders.models import Order
from reports.models import TransactionReport
from services.exceptions import NotFoundError, OrderValidationError, ReportLimitReachedError
from services.proofs import REPORT_FOLDER, discard_proofs, save_proof_image

logger = logging.getLogger(__name__)

VALID_CATEGORIES = {choice for choice, _ in TransactionReport.CATEGORY_CHOICES}


def _order_for_party(user, order_id: int, lock: bool = False) -> Order:
    queryset = Order.objects.select_for_update() if lock else Order.objects.all()
    order = queryset.filter(id=order_id).first()
    # Non-parties get the same answer as a missing order
    if order is None or not order.is_party(user):
        raise NotFoundError("Order not found")
    return order


def file_report(reporter, order_id: int, category: str, detail: str, proof=None) -> TransactionReport:
    """
    File a report against an order the reporter took part in.

    At most REPORT_LIMIT_PER_ORDER reports per (order, reporter); the count
    and the insert run under a row lock on the order. Never touches the
    order's status.
    """
    category = (category or "").strip().upper()
    if category not in VALID_CATEGORIES:
        raise OrderValidationError("Invalid report category", errors={"category": sorted(VALID_CATEGORIES)})
    detail = (detail or "").strip()
    if not detail:
        raise OrderValidationError("Report detail is required")

    # Existence check before touching storage
    _order_for_party(reporter, order_id)

    limit = getattr(settings, "REPORT_LIMIT_PER_ORDER", 2)
    proof_ref = save_proof_image(proof, REPORT_FOLDER) if proof else ""

    try:
        with transaction.atomic():
            order = _order_for_party(reporter, order_id, lock=True)
            existing = TransactionReport.objects.filter(order=order, reporter=reporter).count()
            if existing >= limit:
                raise ReportLimitReachedError()

            report = TransactionReport.objects.create(
                order=order,
                reporter=reporter,
                category=category,
                detail=detail,
                proof_ref=proof_ref,
            )
    except Exception:
        if proof_ref:
            discard_proofs([proof_ref])
        raise

    logger.info("Report %s filed on order %s by user %s", report.id, order_id, reporter.pk)
    return report


def list_reports(user, order_id: int):
    """Reports the caller filed on this order."""
    order = _order_for_party(user, order_id)
    return list(TransactionReport.objects.filter(order=order, reporter=user))
