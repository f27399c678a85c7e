"""Transfer and registry fees due when the property changes hands.

Both schedules follow the Porto Alegre / RS tables: a flat 3 % transfer tax
(ITBI) on the sale price and a bracketed flat registry fee estimated from the
2024/2025 registry emolument table.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Tuple

TRANSFER_TAX_RATE = Decimal("0.03")

# (inclusive upper bound of the sale price, flat fee)
REGISTRY_FEE_BRACKETS: List[Tuple[Decimal, Decimal]] = [
    (Decimal("40000"), Decimal("300")),
    (Decimal("80000"), Decimal("650")),
    (Decimal("160000"), Decimal("1100")),
    (Decimal("320000"), Decimal("1800")),
    (Decimal("640000"), Decimal("3200")),
    (Decimal("1200000"), Decimal("5500")),
    (Decimal("2500000"), Decimal("7800")),
]
REGISTRY_FEE_CEILING = Decimal("10000")


def transfer_tax(base: Decimal) -> Decimal:
    """Return the transfer tax (ITBI) due on ``base``."""
    return base * TRANSFER_TAX_RATE


def registry_fee(base: Decimal) -> Decimal:
    """Return the flat registry fee for a sale price of ``base``.

    Brackets are checked in ascending order and their upper bounds are
    inclusive, so ``40000`` still falls in the first bracket while
    ``40000.01`` moves to the second. Prices above the last bracket pay the
    flat ceiling.
    """
    for upper_bound, fee in REGISTRY_FEE_BRACKETS:
        if base <= upper_bound:
            return fee
    return REGISTRY_FEE_CEILING
