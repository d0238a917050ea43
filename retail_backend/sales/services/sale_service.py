# sales/services/sale_service.py

"""
SALE TRANSACTION COORDINATOR (APPLICATION SERVICE)

Purpose:
- Turn a checkout request into a completed Sale (atomic, auditable).
- Decrement stock per line through the inventory ledger, paired with a
  SALE_OUT StockMovement.
- Record initial payments and derive payment status.
- Read side: sale detail, filtered listing, receipt payload.

Hard rules:
- Quantities are integer units; money is 2dp ROUND_HALF_UP.
- Totals are computed server-side:
    line subtotal = unit_price * qty - discount
    subtotal      = sum(line subtotals)
    total         = subtotal + sum(line tax) - header discount
    balance       = paid - total
- Inventory rows for one sale are locked in product-id order.
- Any failure inside the transaction rolls back every row it wrote.
- Warranty issuance / notifications / SMS run only after commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from customers.services.directory import CustomerNotFound, get_customer
from locations.models import Location
from products.services import inventory_ledger
from products.services.directory import ProductNotFound, get_product
from products.services.inventory_ledger import InsufficientStockError, InventoryRowNotFound
from sales.filters import SaleFilter
from sales.models import Sale, SaleItem, SalePayment
from sales.services import side_effects
from sales.services.amounts import ZERO, money, parse_money, parse_quantity
from sales.services.exceptions import (
    InsufficientStock,
    InternalError,
    NotFound,
    ValidationError,
)
from sales.services.payment_methods import normalize_payment_method
from sales.services.payment_service import derive_payment_status
from sales.services.sequence import next_sale_number
from sales.services.stock import take_for_sale

logger = logging.getLogger(__name__)


# ============================================================
# INPUT NORMALIZATION
# ============================================================

@dataclass(frozen=True)
class LineInput:
    product_id: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    tax: Decimal
    warranty_months: int | None

    @property
    def subtotal(self) -> Decimal:
        return money(self.unit_price * self.quantity - self.discount)


@dataclass(frozen=True)
class TenderInput:
    amount: Decimal
    method: str
    reference: str = ""


def _parse_items(items) -> list[LineInput]:
    if not items:
        raise ValidationError("At least one item is required")

    lines = []
    for idx, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{idx}] must be an object")

        product_id = raw.get("product_id")
        if not product_id:
            raise ValidationError(f"items[{idx}].product_id is required")

        warranty = raw.get("warranty_months")
        if warranty is not None:
            if isinstance(warranty, bool) or not isinstance(warranty, int) or warranty < 0:
                raise ValidationError(f"items[{idx}].warranty_months must be a whole number >= 0")

        line = LineInput(
            product_id=str(product_id),
            quantity=parse_quantity(raw.get("quantity"), field_name=f"items[{idx}].quantity"),
            unit_price=parse_money(raw.get("unit_price"), field_name=f"items[{idx}].unit_price"),
            discount=parse_money(
                raw.get("discount"), field_name=f"items[{idx}].discount", default="0"
            ),
            tax=parse_money(raw.get("tax"), field_name=f"items[{idx}].tax", default="0"),
            warranty_months=warranty,
        )
        if line.subtotal < ZERO:
            raise ValidationError(f"items[{idx}].discount exceeds the line amount")
        lines.append(line)

    return lines


def _parse_tenders(*, payments, paid_amount, payment_method, payment_reference) -> list[TenderInput]:
    """
    New format: payments=[{amount, method, reference}, ...].
    Legacy format: a single paid_amount (+ payment_method, default CASH).
    """
    if payments:
        tenders = []
        for idx, raw in enumerate(payments):
            if not isinstance(raw, dict):
                raise ValidationError(f"payments[{idx}] must be an object")
            tenders.append(
                TenderInput(
                    amount=parse_money(
                        raw.get("amount"), field_name=f"payments[{idx}].amount", positive=True
                    ),
                    method=normalize_payment_method(raw.get("method")),
                    reference=str(raw.get("reference") or "").strip(),
                )
            )
        return tenders

    legacy = parse_money(paid_amount, field_name="paid_amount", default="0")
    if legacy == ZERO:
        return []

    return [
        TenderInput(
            amount=legacy,
            method=normalize_payment_method(payment_method or SalePayment.Method.CASH),
            reference=str(payment_reference or "").strip(),
        )
    ]


def _get_location(location_id) -> Location:
    try:
        return Location.objects.get(pk=location_id)
    except (Location.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"Location not found: {location_id}") from None


def _customer_snapshot(*, customer_id, name, phone, email):
    """
    Fill name / phone / email from the customer record where the caller
    left them blank.
    """
    name = (name or "").strip()
    phone = (phone or "").strip()
    email = (email or "").strip()

    if not customer_id:
        return None, name, phone, email

    try:
        customer = get_customer(customer_id)
    except CustomerNotFound as exc:
        raise NotFound(str(exc), details={"customer_id": str(customer_id)}) from exc

    return (
        customer,
        name or customer.name,
        phone or customer.phone,
        email or customer.email,
    )


# ============================================================
# CREATE
# ============================================================

def create_sale(
    *,
    location_id,
    sold_by,
    items,
    customer_id=None,
    customer_name: str = "",
    customer_phone: str = "",
    customer_email: str = "",
    payments=None,
    paid_amount=None,
    payment_method: str | None = None,
    payment_reference: str = "",
    discount_amount=None,
    discount_type: str | None = None,
    discount_reason: str = "",
    tax_rate=None,
    sale_type: str = Sale.SaleType.POS,
    sale_channel: str = "POS",
    notes: str = "",
) -> Sale:
    lines = _parse_items(items)
    tenders = _parse_tenders(
        payments=payments,
        paid_amount=paid_amount,
        payment_method=payment_method,
        payment_reference=payment_reference,
    )

    header_discount = parse_money(discount_amount, field_name="discount_amount", default="0")
    rate = parse_money(tax_rate, field_name="tax_rate", default="0")

    if discount_type and discount_type not in Sale.DiscountType.values:
        raise ValidationError(f"Invalid discount_type: {discount_type}")
    if sale_type not in Sale.SaleType.values:
        raise ValidationError(f"Invalid sale_type: {sale_type}")

    location = _get_location(location_id)
    customer, name, phone, email = _customer_snapshot(
        customer_id=customer_id,
        name=customer_name,
        phone=customer_phone,
        email=customer_email,
    )

    # ---- totals ----
    subtotal = money(sum((line.subtotal for line in lines), ZERO))
    total_tax = money(sum((line.tax for line in lines), ZERO))
    total = money(subtotal + total_tax - header_discount)
    if total < ZERO:
        raise ValidationError("discount_amount exceeds the sale amount")

    paid = money(sum((t.amount for t in tenders), ZERO))

    sale_number = next_sale_number()

    try:
        sale = _persist_sale(
            sale_number=sale_number,
            location=location,
            sold_by=sold_by,
            customer=customer,
            customer_name=name,
            customer_phone=phone,
            customer_email=email,
            lines=lines,
            tenders=tenders,
            subtotal=subtotal,
            tax_amount=total_tax,
            discount_amount=header_discount,
            total=total,
            paid=paid,
            discount_type=discount_type or None,
            discount_reason=(discount_reason or "").strip(),
            tax_rate=rate,
            sale_type=sale_type,
            sale_channel=(sale_channel or "POS").strip(),
            notes=(notes or "").strip(),
        )
    except DatabaseError as exc:
        logger.exception("sale persistence failed", extra={"sale_number": sale_number})
        raise InternalError(f"Failed to create sale: {sale_number}") from exc

    logger.info(
        "sale created",
        extra={
            "sale_id": str(sale.id),
            "sale_number": sale.sale_number,
            "total_amount": str(sale.total_amount),
            "paid_amount": str(sale.paid_amount),
            "payment_status": sale.payment_status,
        },
    )
    return sale


@transaction.atomic
def _persist_sale(
    *,
    sale_number,
    location,
    sold_by,
    customer,
    customer_name,
    customer_phone,
    customer_email,
    lines,
    tenders,
    subtotal,
    tax_amount,
    discount_amount,
    total,
    paid,
    discount_type,
    discount_reason,
    tax_rate,
    sale_type,
    sale_channel,
    notes,
) -> Sale:
    first = tenders[0] if tenders else None

    sale = Sale.objects.create(
        sale_number=sale_number,
        customer=customer,
        customer_name=customer_name,
        customer_phone=customer_phone,
        customer_email=customer_email,
        location=location,
        sold_by=sold_by,
        sale_type=sale_type,
        sale_channel=sale_channel,
        subtotal=subtotal,
        discount_amount=discount_amount,
        discount_type=discount_type,
        discount_reason=discount_reason,
        tax_amount=tax_amount,
        tax_rate=tax_rate,
        total_amount=total,
        paid_amount=paid,
        balance_amount=money(paid - total),
        payment_status=derive_payment_status(paid=paid, total=total),
        payment_method=first.method if first else "",
        payment_reference=first.reference if first else "",
        status=Sale.Status.COMPLETED,
        notes=notes,
    )

    # ---- resolve products, then lock their rows in a stable order ----
    products = []
    for line in lines:
        try:
            product = get_product(line.product_id)
        except ProductNotFound as exc:
            raise NotFound(str(exc), details={"product_id": line.product_id}) from exc
        if not product.is_active:
            raise ValidationError(f"Product is not active: {product.name}")
        products.append(product)

    rows = inventory_ledger.lock_rows(
        location_id=location.id, product_ids=[p.id for p in products]
    )

    sale_day = timezone.localdate(sale.sale_date)

    for line, product in zip(lines, products):
        if str(product.id) not in rows:
            raise ValidationError(f"Product not available in this location: {product.name}")

        try:
            take_for_sale(
                product=product,
                location_id=location.id,
                quantity=line.quantity,
                sale=sale,
                performed_by=sold_by,
            )
        except InsufficientStockError as exc:
            raise InsufficientStock(
                product_name=exc.product_name,
                available=exc.available,
                requested=exc.requested,
            ) from exc
        except InventoryRowNotFound as exc:
            raise ValidationError(
                f"Product not available in this location: {product.name}"
            ) from exc

        months = line.warranty_months
        if months is None:
            months = int(product.warranty_months or 0)

        SaleItem.objects.create(
            sale=sale,
            product=product,
            product_name=product.name,
            product_sku=product.sku,
            quantity=line.quantity,
            unit_price=line.unit_price,
            cost_price=money(product.cost_price),
            discount_amount=line.discount,
            tax_amount=line.tax,
            warranty_months=months,
            warranty_expiry=sale_day + relativedelta(months=months) if months > 0 else None,
        )

    for n, tender in enumerate(tenders, start=1):
        SalePayment.objects.create(
            sale=sale,
            payment_number=f"PAY-{sale.sale_number}-{n}",
            amount=tender.amount,
            method=tender.method,
            reference_number=tender.reference,
            status=SalePayment.Status.COMPLETED,
            received_by=sold_by,
            payment_date=sale.sale_date,
        )

    side_effects.schedule_sale_created(sale_id=sale.id)
    return sale


# ============================================================
# READS
# ============================================================

def sale_queryset():
    return Sale.objects.select_related(
        "location", "customer", "sold_by", "cancelled_by"
    ).prefetch_related("items", "payments", "refunds__items")


def get_sale_by_id(sale_id) -> Sale:
    try:
        return sale_queryset().get(pk=sale_id)
    except (Sale.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound("Sale not found", details={"sale_id": str(sale_id)}) from None


def list_sales(*, filters: dict | None = None):
    """
    Filtered, newest-first queryset. Pagination is applied by the caller
    (DRF paginator on the API).
    """
    filterset = SaleFilter(data=filters or {}, queryset=sale_queryset())
    if not filterset.is_valid():
        raise ValidationError("Invalid sale filters", details=dict(filterset.errors))
    return filterset.qs


def get_sale_receipt(sale_id) -> dict:
    """
    Read-only receipt / invoice payload. Invoice renderers consume this
    and never write back.
    """
    sale = get_sale_by_id(sale_id)
    location = sale.location
    refunded = money(sum((r.amount for r in sale.refunds.all()), ZERO))

    return {
        "company": {
            "name": settings.COMPANY_NAME,
            "location_name": location.name,
            "address": location.address,
            "phone": location.phone,
            "email": location.email,
        },
        "sale_id": str(sale.id),
        "sale_number": sale.sale_number,
        "sale_date": sale.sale_date.isoformat(),
        "status": sale.status,
        "payment_status": sale.payment_status,
        "customer": {
            "id": str(sale.customer_id) if sale.customer_id else None,
            "name": sale.customer_name,
            "phone": sale.customer_phone,
            "email": sale.customer_email,
        },
        "sold_by": getattr(sale.sold_by, "display_name", None),
        "items": [
            {
                "product_id": str(item.product_id) if item.product_id else None,
                "name": item.product_name,
                "sku": item.product_sku,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price),
                "discount": str(item.discount_amount),
                "tax": str(item.tax_amount),
                "subtotal": str(item.subtotal),
                "warranty_months": item.warranty_months,
                "warranty_expiry": item.warranty_expiry.isoformat()
                if item.warranty_expiry
                else None,
            }
            for item in sale.items.all()
        ],
        "payments": [
            {
                "payment_number": p.payment_number,
                "amount": str(p.amount),
                "method": p.method,
                "reference": p.reference_number,
                "payment_date": p.payment_date.isoformat(),
            }
            for p in sale.payments.all()
        ],
        "refunds": [
            {
                "refund_number": r.refund_number,
                "amount": str(r.amount),
                "reason": r.reason,
                "refunded_at": r.refunded_at.isoformat(),
            }
            for r in sale.refunds.all()
        ],
        "totals": {
            "subtotal": str(sale.subtotal),
            "discount": str(sale.discount_amount),
            "tax": str(sale.tax_amount),
            "total": str(sale.total_amount),
            "paid": str(sale.paid_amount),
            "balance": str(sale.balance_amount),
            "refunded": str(refunded),
        },
        "notes": sale.notes,
    }
