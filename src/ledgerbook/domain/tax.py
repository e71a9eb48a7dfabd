"""Flat-rate tax computation."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")


@dataclass(frozen=True)
class TaxComputation:
    tax_amount: Decimal
    total: Decimal


def to_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_tax(base: Decimal, rate: Optional[Decimal] = None) -> TaxComputation:
    """Compute tax amount and total for a base amount at a percentage rate.

    ``tax_amount = base * rate / 100`` and ``total = base + tax_amount``.
    A missing rate means 0. Negative bases and rates are accepted as-is;
    callers are responsible for sane inputs.

    Args:
        base: Pre-tax amount
        rate: Tax rate as a percentage (e.g. 18 for 18%)

    Returns:
        TaxComputation with both values rounded to cents
    """
    if rate is None:
        rate = Decimal("0")
    base = to_money(base)
    tax_amount = to_money(base * Decimal(rate) / Decimal(100))
    return TaxComputation(tax_amount=tax_amount, total=base + tax_amount)
