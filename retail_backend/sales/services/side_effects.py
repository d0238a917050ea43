# sales/services/side_effects.py

"""
POST-COMMIT SIDE EFFECTS (BEST-EFFORT)

Hooks registered with transaction.on_commit from inside the core
operations. They run only once the sale's own transaction has committed,
so nothing here can roll a sale back.

Rules:
- Every step is isolated: a failure is logged and the next step still runs.
- Nothing is re-raised to the caller.
- SALES_SIDE_EFFECTS_ENABLED=False disables all hooks.
"""

from __future__ import annotations

import logging
from functools import partial

from django.conf import settings
from django.db import transaction

from notifications.services import dispatcher, sms
from sales.models import Sale
from warranty.services.issuer import issue_from_line_item

logger = logging.getLogger(__name__)


def _enabled() -> bool:
    return bool(getattr(settings, "SALES_SIDE_EFFECTS_ENABLED", True))


def schedule_sale_created(*, sale_id):
    if _enabled():
        transaction.on_commit(partial(run_sale_created, sale_id=sale_id))


def schedule_sale_cancelled(*, sale_id, reason: str = ""):
    if _enabled():
        transaction.on_commit(partial(run_sale_cancelled, sale_id=sale_id, reason=reason))


def _load(sale_id) -> Sale | None:
    sale = (
        Sale.objects.select_related("location", "customer")
        .prefetch_related("items")
        .filter(pk=sale_id)
        .first()
    )
    if sale is None:
        logger.warning("side effects skipped: sale missing", extra={"sale_id": str(sale_id)})
    return sale


# ============================================================
# SALE CREATED
# ============================================================

def run_sale_created(*, sale_id):
    sale = _load(sale_id)
    if sale is None:
        return

    for item in sale.items.all():
        if item.warranty_months <= 0:
            continue
        try:
            issue_from_line_item(item.id)
        except Exception:
            logger.exception(
                "warranty issuance failed",
                extra={"sale_number": sale.sale_number, "sale_item_id": str(item.id)},
            )

    delivered = False
    try:
        result = dispatcher.notify_sale_created(sale)
        delivered = result.customer_delivered
    except Exception:
        logger.exception("sale notification failed", extra={"sale_number": sale.sale_number})

    if delivered or not sale.customer_phone:
        return

    try:
        outcome = sms.send_plain_confirmation(
            phone=sale.customer_phone,
            customer_name=sale.customer_name or "Customer",
            sale_number=sale.sale_number,
            total=sale.total_amount,
            location_name=sale.location.name,
        )
        if not outcome.success:
            logger.warning(
                "sms fallback not delivered",
                extra={"sale_number": sale.sale_number, "reason": outcome.message},
            )
    except Exception:
        logger.exception("sms fallback failed", extra={"sale_number": sale.sale_number})


# ============================================================
# SALE CANCELLED
# ============================================================

def run_sale_cancelled(*, sale_id, reason: str = ""):
    sale = _load(sale_id)
    if sale is None:
        return

    try:
        dispatcher.notify_sale_cancelled(sale, reason=reason)
    except Exception:
        logger.exception(
            "cancellation notification failed", extra={"sale_number": sale.sale_number}
        )
