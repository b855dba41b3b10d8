# tests/test_pricing.py
from __future__ import annotations

import pytest

from catalog_api.services.pricing import calculate_pricing


def test_no_discount():
    p = calculate_pricing(49.9)
    assert p.original_price == 49.9
    assert p.discount_percentage == 0
    assert p.discount_amount == 0
    assert p.final_price == 49.9
    assert p.savings == 0
    assert p.has_discount is False


def test_none_discount_is_zero():
    assert calculate_pricing(10, None).final_price == 10


@pytest.mark.parametrize(
    "price,discount,amount,final",
    [
        (100, 15, 15.0, 85.0),
        (19.99, 15, 3.0, 16.99),
        (0.1, 50, 0.05, 0.05),
        # half-up, nu banker's rounding
        (0.25, 10, 0.03, 0.23),
        (1.005, 0, 0.0, 1.01),
        (999.99, 100, 999.99, 0.0),
    ],
)
def test_rounding(price, discount, amount, final):
    p = calculate_pricing(price, discount)
    assert p.discount_amount == amount
    assert p.savings == amount
    assert p.final_price == final
    assert p.has_discount is (discount > 0)


def test_wire_names():
    dumped = calculate_pricing(10, 5).model_dump(by_alias=True)
    assert set(dumped) == {
        "originalPrice",
        "discountPercentage",
        "discountAmount",
        "finalPrice",
        "savings",
        "hasDiscount",
    }
