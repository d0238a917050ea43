# sales/services/refund_service.py

"""
REFUND PROCESSOR (DOMAIN-CONTROLLED)

Purpose:
- Record money returned against a sale, with an optional list of goods
  that came back.
- Restore stock for returned goods (RETURN_IN movements).
- Advance the sale to PARTIAL_REFUND or REFUNDED from the cumulative
  refunded amount.

Rules:
- Cumulative refunds are bounded by SALES_REFUND_LIMIT_POLICY:
    total -> sum(refunds) <= sale.total_amount
    paid  -> sum(refunds) <= sale.paid_amount
    both  -> both bounds
- A line can never be returned more times than it was sold.
- paid / balance / payment_status stay as they were (historical).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from products.models import StockMovement
from products.services.inventory_ledger import InventoryRowNotFound
from sales.models import Sale, SaleItem, SaleRefund, SaleRefundItem
from sales.services.amounts import ZERO, money, parse_money, parse_quantity
from sales.services.exceptions import InternalError, InvalidState, ValidationError
from sales.services.payment_methods import normalize_payment_method
from sales.services.payment_service import lock_sale
from sales.services.sale_lifecycle import refund_status_for, validate_transition
from sales.services.stock import restore

logger = logging.getLogger(__name__)

POLICY_TOTAL = "total"
POLICY_PAID = "paid"
POLICY_BOTH = "both"
REFUND_LIMIT_POLICIES = (POLICY_TOTAL, POLICY_PAID, POLICY_BOTH)

REFUND_NUMBER_ATTEMPTS = 5


@dataclass(frozen=True)
class ReturnLine:
    sale_item: SaleItem
    quantity: int


def refund_limit_policy() -> str:
    policy = str(getattr(settings, "SALES_REFUND_LIMIT_POLICY", POLICY_TOTAL)).lower()
    if policy not in REFUND_LIMIT_POLICIES:
        raise ValidationError(f"Unknown refund limit policy: {policy}")
    return policy


def refunded_total(sale: Sale) -> Decimal:
    total = sale.refunds.aggregate(total=Sum("amount"))["total"]
    return money(total or ZERO)


def _check_limit(*, sale: Sale, prior: Decimal, amount: Decimal):
    policy = refund_limit_policy()
    cumulative = money(prior + amount)

    bounds = []
    if policy in (POLICY_TOTAL, POLICY_BOTH):
        bounds.append(("total", sale.total_amount))
    if policy in (POLICY_PAID, POLICY_BOTH):
        bounds.append(("paid", sale.paid_amount))

    for label, bound in bounds:
        if cumulative > bound:
            raise ValidationError(
                f"Refund amount exceeds sale {label}. "
                f"Already refunded: {prior}, Requested: {amount}, Limit: {bound}",
                details={
                    "already_refunded": str(prior),
                    "requested": str(amount),
                    "limit": str(bound),
                    "policy": policy,
                },
            )


def _next_refund_number(now) -> str:
    """
    REF-<year>-<epoch millis>; bumped by one millisecond until unused.
    """
    millis = int(now.timestamp() * 1000)
    while True:
        number = f"REF-{now.year}-{millis}"
        if not SaleRefund.objects.filter(refund_number=number).exists():
            return number
        millis += 1


def _resolve_return_lines(sale: Sale, items) -> list[ReturnLine]:
    """
    Each entry names either a sale_item_id or a product_id on this sale.
    """
    if not items:
        return []

    sale_items = list(sale.items.all())
    by_id = {str(i.id): i for i in sale_items}
    by_product = {str(i.product_id): i for i in sale_items if i.product_id}

    requested: dict[str, int] = {}
    lines = []
    for idx, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{idx}] must be an object")

        sale_item = None
        if raw.get("sale_item_id"):
            sale_item = by_id.get(str(raw["sale_item_id"]))
        elif raw.get("product_id"):
            sale_item = by_product.get(str(raw["product_id"]))
        else:
            raise ValidationError(f"items[{idx}] needs product_id or sale_item_id")

        if sale_item is None:
            raise ValidationError(
                f"items[{idx}] is not part of sale {sale.sale_number}",
                details={"item": {k: str(v) for k, v in raw.items()}},
            )

        qty = parse_quantity(raw.get("quantity"), field_name=f"items[{idx}].quantity")
        key = str(sale_item.id)
        requested[key] = requested.get(key, 0) + qty
        lines.append(ReturnLine(sale_item=sale_item, quantity=qty))

    for key, qty in requested.items():
        sale_item = by_id[key]
        already = (
            SaleRefundItem.objects.filter(sale_item=sale_item).aggregate(q=Sum("quantity"))["q"]
            or 0
        )
        if already + qty > sale_item.quantity:
            raise ValidationError(
                f"Cannot return more than sold for {sale_item.product_name}. "
                f"Sold: {sale_item.quantity}, Already returned: {already}, Requested: {qty}",
                details={
                    "sale_item_id": key,
                    "sold": sale_item.quantity,
                    "already_returned": already,
                    "requested": qty,
                },
            )

    return lines


def _insert_refund(*, sale: Sale, now, **fields) -> SaleRefund:
    """
    refund_number is unique across all sales; a concurrent refund in the
    same millisecond loses the insert and retries from the next one.
    """
    for attempt in range(REFUND_NUMBER_ATTEMPTS):
        number = _next_refund_number(now + timedelta(milliseconds=attempt))
        try:
            with transaction.atomic():
                return SaleRefund.objects.create(
                    sale=sale, refund_number=number, refunded_at=now, **fields
                )
        except IntegrityError:
            logger.warning(
                "refund number taken, retrying",
                extra={"refund_number": number, "sale_number": sale.sale_number},
            )
    raise InternalError(
        f"Could not allocate a refund number for sale {sale.sale_number}",
        details={"sale_id": str(sale.id)},
    )


def create_refund(
    *,
    sale_id,
    amount,
    reason: str,
    method,
    processed_by=None,
    items=None,
) -> SaleRefund:
    amount = parse_money(amount, field_name="amount", positive=True)
    method = normalize_payment_method(method)
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Refund reason is required")

    try:
        refund, sale, cumulative = _apply_refund(
            sale_id=sale_id,
            amount=amount,
            reason=reason,
            method=method,
            processed_by=processed_by,
            items=items,
        )
    except DatabaseError as exc:
        logger.exception("refund persistence failed", extra={"sale_id": str(sale_id)})
        raise InternalError(
            "Failed to create refund", details={"sale_id": str(sale_id)}
        ) from exc

    logger.info(
        "refund created",
        extra={
            "sale_number": sale.sale_number,
            "refund_number": refund.refund_number,
            "amount": str(amount),
            "cumulative_refunds": str(cumulative),
            "status": sale.status,
        },
    )
    return refund


@transaction.atomic
def _apply_refund(*, sale_id, amount, reason, method, processed_by, items):
    sale = lock_sale(sale_id)

    if sale.status == Sale.Status.CANCELLED:
        raise InvalidState(
            "Cannot refund a cancelled sale",
            details={"sale_id": str(sale.id), "status": sale.status},
        )
    if sale.status == Sale.Status.REFUNDED:
        raise InvalidState(
            "Sale is already fully refunded",
            details={"sale_id": str(sale.id), "status": sale.status},
        )

    prior = refunded_total(sale)
    _check_limit(sale=sale, prior=prior, amount=amount)

    lines = _resolve_return_lines(sale, items)

    cumulative = money(prior + amount)
    target = refund_status_for(total=sale.total_amount, refunded=cumulative)
    validate_transition(sale=sale, target_status=target)

    refund = _insert_refund(
        sale=sale,
        now=timezone.now(),
        amount=amount,
        reason=reason,
        refund_method=method,
        processed_by=processed_by,
    )

    for line in lines:
        restored = False
        if line.sale_item.product_id:
            try:
                restore(
                    product_id=line.sale_item.product_id,
                    location_id=sale.location_id,
                    quantity=line.quantity,
                    movement_type=StockMovement.MovementType.RETURN_IN,
                    reference_kind=StockMovement.ReferenceKind.SALE_REFUND,
                    reference_id=refund.id,
                    note=f"Stock restored - Refund: {refund.refund_number} - {reason}",
                    performed_by=processed_by,
                )
                restored = True
            except InventoryRowNotFound:
                logger.warning(
                    "refund stock row missing; goods not restocked",
                    extra={
                        "refund_number": refund.refund_number,
                        "product_id": str(line.sale_item.product_id),
                        "location_id": str(sale.location_id),
                    },
                )

        SaleRefundItem.objects.create(
            refund=refund,
            sale_item=line.sale_item,
            product_id=line.sale_item.product_id,
            quantity=line.quantity,
            stock_restored=restored,
        )

    sale.status = target
    sale.save(update_fields=["status", "updated_at"])
    return refund, sale, cumulative
