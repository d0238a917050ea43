# warranty/services/issuer.py

"""
WARRANTY ISSUER

issue_from_line_item(sale_item_id) -> WarrantyCard | None

Rules:
- No card when the line carries no warranty months.
- Idempotent: a line that already has a card gets that card back.
- Numbers are WRN-<year>-<4-digit seq> from the shared sequence counter.
"""

from __future__ import annotations

import logging

from dateutil.relativedelta import relativedelta
from django.db import IntegrityError, transaction
from django.utils import timezone

from sales.models import SaleItem
from sales.services.sequence import format_number, highest_suffix, next_value
from warranty.models import (
    DEFAULT_COVERAGE,
    DEFAULT_EXCLUSIONS,
    WarrantyCard,
    default_terms,
)

logger = logging.getLogger(__name__)


class WarrantyIssueError(Exception):
    pass


def next_warranty_number(*, year: int | None = None) -> str:
    year = year or timezone.now().year
    prefix = f"WRN-{year}-"

    def _seed() -> int:
        return highest_suffix(
            WarrantyCard.objects.filter(warranty_number__startswith=prefix).values_list(
                "warranty_number", flat=True
            )
        )

    return format_number(prefix, next_value(scope=f"WRN-{year}", seed=_seed))


def issue_from_line_item(sale_item_id) -> WarrantyCard | None:
    try:
        item = SaleItem.objects.select_related(
            "sale", "sale__customer", "product"
        ).get(pk=sale_item_id)
    except SaleItem.DoesNotExist:
        raise WarrantyIssueError(f"Sale item not found: {sale_item_id}") from None

    if item.warranty_months <= 0:
        return None

    existing = WarrantyCard.objects.filter(sale_item=item).first()
    if existing is not None:
        return existing

    sale = item.sale
    customer = sale.customer
    start = timezone.localdate()

    try:
        with transaction.atomic():
            card = WarrantyCard.objects.create(
                warranty_number=next_warranty_number(),
                sale=sale,
                sale_item=item,
                product_id=item.product_id,
                location_id=sale.location_id,
                customer=customer,
                product_name=item.product_name,
                product_sku=item.product_sku,
                customer_name=sale.customer_name
                or (customer.name if customer else "")
                or "Walk-in Customer",
                customer_phone=sale.customer_phone or (customer.phone if customer else ""),
                customer_email=sale.customer_email or (customer.email if customer else ""),
                warranty_months=item.warranty_months,
                start_date=start,
                expiry_date=start + relativedelta(months=item.warranty_months),
                terms=default_terms(item.warranty_months),
                coverage=DEFAULT_COVERAGE,
                exclusions=DEFAULT_EXCLUSIONS,
            )
    except IntegrityError:
        # lost a race with a concurrent issuer for the same line
        card = WarrantyCard.objects.filter(sale_item=item).first()
        if card is None:
            raise
        return card

    logger.info(
        "warranty issued",
        extra={
            "warranty_number": card.warranty_number,
            "sale_number": sale.sale_number,
            "sale_item_id": str(item.id),
        },
    )
    return card
