# products/services/inventory_ledger.py

"""
======================================================
PATH: products/services/inventory_ledger.py
======================================================
INVENTORY LEDGER (per product, per location)

Purpose:
- Check availability without locking (UI hints, pre-validation).
- Lock inventory rows in a stable order before a multi-item mutation.
- Decrement / increment on-hand quantity under a row lock.

Rules:
- Quantities are integer units.
- available_quantity = quantity - reserved_quantity (model-enforced on save).
- This module NEVER writes StockMovement rows. Callers pair every
  LedgerChange with products.services.stock_movements.record_movement()
  inside the same transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from django.db import transaction

from products.models import ProductInventory


# ============================================================
# DOMAIN ERRORS
# ============================================================

class InventoryLedgerError(Exception):
    pass


class InventoryRowNotFound(InventoryLedgerError):
    def __init__(self, *, product_id, location_id):
        super().__init__(
            f"No inventory row for product {product_id} at location {location_id}"
        )
        self.product_id = product_id
        self.location_id = location_id


class InsufficientStockError(InventoryLedgerError):
    def __init__(self, *, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Required: {requested}"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


@dataclass(frozen=True)
class LedgerChange:
    row: ProductInventory
    before: int
    after: int


def _to_int_qty(value) -> int:
    """
    HARD RULE: quantities are positive whole units.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("quantity must be a whole integer unit")
    if value <= 0:
        raise ValueError("quantity must be >= 1")
    return value


def _locked_row(product_id, location_id) -> ProductInventory:
    row = (
        ProductInventory.objects.select_for_update()
        .select_related("product")
        .filter(product_id=product_id, location_id=location_id)
        .first()
    )
    if row is None:
        raise InventoryRowNotFound(product_id=product_id, location_id=location_id)
    return row


# ============================================================
# READS
# ============================================================

def check_available(*, product_id, location_id, quantity: int) -> bool:
    available = (
        ProductInventory.objects.filter(product_id=product_id, location_id=location_id)
        .values_list("available_quantity", flat=True)
        .first()
    )
    if available is None:
        return False
    return int(available) >= int(quantity)


# ============================================================
# LOCKING
# ============================================================

def lock_rows(*, location_id, product_ids: Iterable) -> dict:
    """
    Lock every inventory row a multi-item operation will touch.

    Rows are locked in product-id order so two overlapping sales acquire
    locks in the same sequence. Missing rows are simply absent from the
    returned {product_id: row} map.
    """
    ids = sorted({str(pid) for pid in product_ids})
    rows = (
        ProductInventory.objects.select_for_update()
        .filter(location_id=location_id, product_id__in=ids)
        .order_by("product_id")
    )
    return {str(row.product_id): row for row in rows}


# ============================================================
# MUTATIONS
# ============================================================

@transaction.atomic
def decrement(*, product_id, location_id, quantity: int) -> LedgerChange:
    qty = _to_int_qty(quantity)
    row = _locked_row(product_id, location_id)

    if int(row.available_quantity) < qty:
        raise InsufficientStockError(
            product_name=row.product.name,
            available=int(row.available_quantity),
            requested=qty,
        )

    before = int(row.quantity)
    row.quantity = before - qty
    row.save(update_fields=["quantity"])

    return LedgerChange(row=row, before=before, after=int(row.quantity))


@transaction.atomic
def increment(*, product_id, location_id, quantity: int) -> LedgerChange:
    qty = _to_int_qty(quantity)
    row = _locked_row(product_id, location_id)

    before = int(row.quantity)
    row.quantity = before + qty
    row.save(update_fields=["quantity"])

    return LedgerChange(row=row, before=before, after=int(row.quantity))
