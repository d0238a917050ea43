# sales/services/sequence.py

"""
SEQUENCE GENERATOR

Human-readable, yearly-scoped, monotonic identifiers:
- SALE-<year>-<4-digit seq>
- WRN-<year>-<4-digit seq>  (warranty cards)

Each scope has one SequenceCounter row, taken under select_for_update so
concurrent callers serialize. The first time a scope is used, the counter
is seeded from the highest number already stored, so numbering continues
where the scan-based scheme left off.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from django.db import transaction
from django.utils import timezone

from sales.models import Sale, SequenceCounter

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def highest_suffix(values: Iterable[str]) -> int:
    best = 0
    for value in values:
        match = _TRAILING_DIGITS.search(value or "")
        if match:
            best = max(best, int(match.group(1)))
    return best


@transaction.atomic
def next_value(*, scope: str, seed: Callable[[], int] | None = None) -> int:
    counter = SequenceCounter.objects.select_for_update().filter(scope=scope).first()

    if counter is None:
        start = int(seed()) if seed is not None else 0
        SequenceCounter.objects.get_or_create(scope=scope, defaults={"last_value": start})
        counter = SequenceCounter.objects.select_for_update().get(scope=scope)

    counter.last_value += 1
    counter.save(update_fields=["last_value", "updated_at"])
    return counter.last_value


def format_number(prefix: str, value: int) -> str:
    return f"{prefix}{value:04d}"


def next_sale_number(*, year: int | None = None) -> str:
    year = year or timezone.now().year
    prefix = f"SALE-{year}-"

    def _seed() -> int:
        return highest_suffix(
            Sale.objects.filter(sale_number__startswith=prefix).values_list(
                "sale_number", flat=True
            )
        )

    return format_number(prefix, next_value(scope=f"SALE-{year}", seed=_seed))
