# catalog_api/services/pricing.py
"""Prețuri derivate la citire (nu se persistă)."""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from catalog_api.schemas.product import Pricing

_CENT = Decimal("0.01")


def _dec(v: float) -> Decimal:
    # via str() ca să evităm artefactele de reprezentare binară (ex. 0.1 + 0.2)
    return Decimal(str(v))


def _round2(v: Decimal) -> float:
    return float(v.quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_pricing(price: float, discount: Optional[float] = 0) -> Pricing:
    """
    discountAmount = price * discount / 100
    finalPrice     = price - discountAmount
    savings        = discountAmount
    Toate sumele rotunjite la 2 zecimale (half-up); recordul nu e modificat.
    """
    pct = _dec(discount or 0)
    original = _dec(price)
    discount_amount = original * pct / 100
    final_price = original - discount_amount
    return Pricing(
        original_price=_round2(original),
        discount_percentage=float(pct),
        discount_amount=_round2(discount_amount),
        final_price=_round2(final_price),
        savings=_round2(discount_amount),
        has_discount=pct > 0,
    )
