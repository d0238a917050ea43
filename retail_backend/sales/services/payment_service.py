# sales/services/payment_service.py

"""
PAYMENT ACCUMULATOR

Purpose:
- Append a payment (installment / split tender) to an existing sale.
- Recompute paid / balance / payment_status on the sale header.

Rules:
- Sale header is locked for the duration of the append.
- balance = paid - total (negative = customer still owes).
- Sale.status is never changed by a payment.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from sales.models import Sale, SalePayment
from sales.services.amounts import money, parse_money
from sales.services.exceptions import InternalError, InvalidState, NotFound
from sales.services.payment_methods import normalize_payment_method

logger = logging.getLogger(__name__)


def derive_payment_status(*, paid: Decimal, total: Decimal) -> str:
    if paid >= total:
        return Sale.PaymentStatus.COMPLETED
    if paid > 0:
        return Sale.PaymentStatus.PARTIAL
    return Sale.PaymentStatus.PENDING


def lock_sale(sale_id) -> Sale:
    try:
        return Sale.objects.select_for_update().get(pk=sale_id)
    except (Sale.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound("Sale not found", details={"sale_id": str(sale_id)}) from None


def add_payment(
    *,
    sale_id,
    amount,
    method,
    reference: str = "",
    notes: str = "",
    received_by=None,
) -> SalePayment:
    amount = parse_money(amount, field_name="amount", positive=True)
    method = normalize_payment_method(method)

    try:
        payment, sale = _append_payment(
            sale_id=sale_id,
            amount=amount,
            method=method,
            reference=(reference or "").strip(),
            notes=(notes or "").strip(),
            received_by=received_by,
        )
    except DatabaseError as exc:
        logger.exception("payment persistence failed", extra={"sale_id": str(sale_id)})
        raise InternalError(
            "Failed to add payment", details={"sale_id": str(sale_id)}
        ) from exc

    logger.info(
        "payment added",
        extra={
            "sale_number": sale.sale_number,
            "payment_number": payment.payment_number,
            "amount": str(amount),
            "balance_amount": str(sale.balance_amount),
        },
    )
    return payment


@transaction.atomic
def _append_payment(*, sale_id, amount, method, reference, notes, received_by):
    sale = lock_sale(sale_id)

    if sale.status == Sale.Status.CANCELLED:
        raise InvalidState(
            "Cannot add payment to a cancelled sale",
            details={"sale_id": str(sale.id), "status": sale.status},
        )

    n = sale.payments.count() + 1
    payment = SalePayment.objects.create(
        sale=sale,
        payment_number=f"PAY-{sale.sale_number}-{n}",
        amount=amount,
        method=method,
        reference_number=reference,
        status=SalePayment.Status.COMPLETED,
        received_by=received_by,
        notes=notes,
        payment_date=timezone.now(),
    )

    paid = money(sale.paid_amount + amount)
    sale.paid_amount = paid
    sale.balance_amount = money(paid - sale.total_amount)
    # an installment never moves a sale back to PENDING
    sale.payment_status = (
        Sale.PaymentStatus.COMPLETED
        if paid >= sale.total_amount
        else Sale.PaymentStatus.PARTIAL
    )
    sale.save(update_fields=["paid_amount", "balance_amount", "payment_status", "updated_at"])
    return payment, sale
