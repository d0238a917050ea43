# products/services/stock_movements.py

"""
STOCK MOVEMENT RECORDER + REPLAY

Purpose:
- Append one immutable StockMovement for every ledger mutation.
- Replay a (product, location) movement chain to prove it reconstructs
  the current on-hand quantity.

Rules:
- Pure insert. The movement quantity is derived from before/after; the
  model rejects a direction that disagrees with movement_type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from products.models import ProductInventory, StockMovement

logger = logging.getLogger(__name__)


def record_movement(
    *,
    product_id,
    location_id,
    quantity_before: int,
    quantity_after: int,
    movement_type: str,
    reference_kind: str,
    reference_id,
    note: str = "",
    performed_by=None,
) -> StockMovement:
    movement = StockMovement(
        product_id=product_id,
        location_id=location_id,
        movement_type=movement_type,
        quantity=abs(int(quantity_after) - int(quantity_before)),
        quantity_before=int(quantity_before),
        quantity_after=int(quantity_after),
        reference_kind=reference_kind,
        reference_id=str(reference_id),
        note=(note or "")[:255],
        performed_by=performed_by,
    )
    movement.save()
    return movement


# ============================================================
# REPLAY / RECONCILIATION
# ============================================================

@dataclass
class ChainReport:
    product_id: str
    location_id: str
    current_quantity: int
    movement_count: int = 0
    opening_quantity: int | None = None
    replayed_quantity: int | None = None
    breaks: list[int] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        if self.breaks:
            return False
        if self.replayed_quantity is None:
            return True
        return self.replayed_quantity == self.current_quantity


def replay_chain(row: ProductInventory) -> ChainReport:
    """
    Replay every movement for one inventory row in creation order.

    The first movement's quantity_before is the opening quantity. A break
    is any movement whose quantity_before differs from the previous
    movement's quantity_after (a mutation that bypassed the ledger).
    """
    report = ChainReport(
        product_id=str(row.product_id),
        location_id=str(row.location_id),
        current_quantity=int(row.quantity),
    )

    movements = (
        StockMovement.objects.filter(product_id=row.product_id, location_id=row.location_id)
        .order_by("id")
        .values_list("id", "movement_type", "quantity", "quantity_before", "quantity_after")
    )

    running = None
    for movement_id, movement_type, quantity, before, after in movements.iterator():
        if running is None:
            report.opening_quantity = int(before)
            running = int(before)
        elif int(before) != running:
            report.breaks.append(movement_id)
            running = int(before)

        sign = -1 if movement_type in StockMovement.OUTBOUND_TYPES else 1
        running += sign * int(quantity)
        report.movement_count += 1

    report.replayed_quantity = running
    return report


def reconcile_rows(queryset=None) -> list[ChainReport]:
    qs = queryset if queryset is not None else ProductInventory.objects.all()
    reports = []
    for row in qs.order_by("product_id", "location_id").iterator():
        report = replay_chain(row)
        if not report.is_consistent:
            logger.warning(
                "stock ledger mismatch",
                extra={
                    "product_id": report.product_id,
                    "location_id": report.location_id,
                    "current_quantity": report.current_quantity,
                    "replayed_quantity": report.replayed_quantity,
                    "breaks": report.breaks,
                },
            )
        reports.append(report)
    return reports
