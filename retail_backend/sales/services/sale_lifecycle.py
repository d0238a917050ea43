# sales/services/sale_lifecycle.py

"""
SALE STATUS MACHINE

    COMPLETED -> PARTIAL_REFUND -> REFUNDED
    COMPLETED -> REFUNDED
    COMPLETED -> CANCELLED        (unpaid only; checked by the canceller)
    DRAFT     -> COMPLETED | CANCELLED

CANCELLED and REFUNDED are final. Nothing here touches the database.
"""

from decimal import Decimal

from sales.models import Sale
from sales.services.exceptions import InvalidState

FINAL_STATUSES = frozenset({Sale.Status.CANCELLED, Sale.Status.REFUNDED})

_NEXT = {
    Sale.Status.DRAFT: frozenset({Sale.Status.COMPLETED, Sale.Status.CANCELLED}),
    Sale.Status.COMPLETED: frozenset(
        {Sale.Status.CANCELLED, Sale.Status.PARTIAL_REFUND, Sale.Status.REFUNDED}
    ),
    # a second partial refund keeps the sale where it is
    Sale.Status.PARTIAL_REFUND: frozenset(
        {Sale.Status.PARTIAL_REFUND, Sale.Status.REFUNDED}
    ),
}


def is_final(status: str) -> bool:
    return status in FINAL_STATUSES


def can_transition(*, from_status: str, to_status: str) -> bool:
    if is_final(from_status):
        return False
    return to_status in _NEXT.get(from_status, frozenset())


def refund_status_for(*, total: Decimal, refunded: Decimal) -> str:
    """Status a sale lands in once `refunded` has been paid back in total."""
    if refunded >= total:
        return Sale.Status.REFUNDED
    return Sale.Status.PARTIAL_REFUND


def validate_transition(*, sale: Sale, target_status: str) -> None:
    if can_transition(from_status=sale.status, to_status=target_status):
        return
    raise InvalidState(
        f"Sale {sale.sale_number} cannot move from {sale.status} to {target_status}",
        details={"status": sale.status, "target_status": target_status},
    )
