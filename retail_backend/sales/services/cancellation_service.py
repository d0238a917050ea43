# sales/services/cancellation_service.py

"""
CANCELLATION PROCESSOR

Cancels an unpaid sale and puts every sold unit back on the shelf.

Rules:
- A sale with any money taken must be refunded, not cancelled.
- Each line is restored with a CANCEL_RESTORE movement at the sale's
  location, referencing the sale.
- Cancellation notifications are dispatched after commit.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from products.models import StockMovement
from products.services.inventory_ledger import InventoryRowNotFound
from sales.models import Sale
from sales.services import side_effects
from sales.services.exceptions import InvalidState
from sales.services.payment_service import lock_sale
from sales.services.sale_lifecycle import validate_transition
from sales.services.stock import restore

logger = logging.getLogger(__name__)


@transaction.atomic
def cancel_sale(*, sale_id, actor=None, reason: str = "") -> Sale:
    sale = lock_sale(sale_id)

    if sale.status == Sale.Status.CANCELLED:
        raise InvalidState(
            "Sale is already cancelled",
            details={"sale_id": str(sale.id), "status": sale.status},
        )

    if sale.paid_amount > 0:
        raise InvalidState(
            "Cannot cancel sale with payments. Please create a refund instead.",
            details={"sale_id": str(sale.id), "paid_amount": str(sale.paid_amount)},
        )

    validate_transition(sale=sale, target_status=Sale.Status.CANCELLED)

    reason = (reason or "").strip()
    actor_label = getattr(actor, "pk", None) or "unknown"

    for item in sale.items.all():
        if not item.product_id:
            continue
        try:
            restore(
                product_id=item.product_id,
                location_id=sale.location_id,
                quantity=item.quantity,
                movement_type=StockMovement.MovementType.CANCEL_RESTORE,
                reference_kind=StockMovement.ReferenceKind.SALE,
                reference_id=sale.id,
                note=(
                    f"Stock restored - Sale cancelled: {sale.sale_number}"
                    f" - Reason: {reason or 'N/A'}"
                ),
                performed_by=actor,
            )
        except InventoryRowNotFound:
            logger.warning(
                "cancel stock row missing; line not restocked",
                extra={
                    "sale_number": sale.sale_number,
                    "product_id": str(item.product_id),
                    "location_id": str(sale.location_id),
                },
            )

    note = f"Cancelled by user {actor_label}. Reason: {reason or 'N/A'}"
    sale.notes = f"{sale.notes}\n\n{note}" if sale.notes else note
    sale.status = Sale.Status.CANCELLED
    sale.cancelled_at = timezone.now()
    sale.cancelled_by = actor
    sale.save(
        update_fields=["status", "notes", "cancelled_at", "cancelled_by", "updated_at"]
    )

    side_effects.schedule_sale_cancelled(sale_id=sale.id, reason=reason)

    logger.info(
        "sale cancelled",
        extra={"sale_number": sale.sale_number, "reason": reason},
    )
    return sale
