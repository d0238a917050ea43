# sales/services/stock.py

"""
LEDGER + MOVEMENT PAIRING

Every inventory mutation made by the sale core goes through here, so a
ledger change and its StockMovement are always written together inside
the caller's transaction.
"""

from __future__ import annotations

from products.models import StockMovement
from products.services import inventory_ledger
from products.services.inventory_ledger import LedgerChange
from products.services.stock_movements import record_movement


def take_for_sale(
    *, product, location_id, quantity: int, sale, performed_by=None
) -> LedgerChange:
    change = inventory_ledger.decrement(
        product_id=product.id, location_id=location_id, quantity=quantity
    )
    record_movement(
        product_id=product.id,
        location_id=location_id,
        quantity_before=change.before,
        quantity_after=change.after,
        movement_type=StockMovement.MovementType.SALE_OUT,
        reference_kind=StockMovement.ReferenceKind.SALE,
        reference_id=sale.id,
        note=f"Sale: {sale.sale_number} - {product.name}",
        performed_by=performed_by,
    )
    return change


def restore(
    *,
    product_id,
    location_id,
    quantity: int,
    movement_type: str,
    reference_kind: str,
    reference_id,
    note: str,
    performed_by=None,
) -> LedgerChange:
    change = inventory_ledger.increment(
        product_id=product_id, location_id=location_id, quantity=quantity
    )
    record_movement(
        product_id=product_id,
        location_id=location_id,
        quantity_before=change.before,
        quantity_after=change.after,
        movement_type=movement_type,
        reference_kind=reference_kind,
        reference_id=reference_id,
        note=note,
        performed_by=performed_by,
    )
    return change
