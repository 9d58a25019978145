from collections import namedtuple
from decimal import Decimal

import pytest

from storefront.services.errors import InvariantViolation
from storefront.services.pricing import cents_to_money, total

Line = namedtuple("Line", "product_id price_cents quantity")


def test_total_of_empty_cart():
    assert total([]) == Decimal("0.00")
    assert str(total([])) == "0.00"


def test_total_sums_price_times_quantity():
    lines = [Line("p1", 1000, 1), Line("p2", 500, 3)]
    assert total(lines) == Decimal("25.00")


def test_total_keeps_cents():
    lines = [Line("p1", 1999, 3), Line("p2", 1, 1)]
    assert total(lines) == Decimal("59.98")


def test_cents_to_money_has_two_places():
    assert str(cents_to_money(5)) == "0.05"
    assert str(cents_to_money(12345)) == "123.45"


def test_negative_price_is_an_invariant_violation():
    with pytest.raises(InvariantViolation):
        total([Line("p1", -100, 1)])


@pytest.mark.parametrize("qty", [0, -2])
def test_non_positive_quantity_is_an_invariant_violation(qty):
    with pytest.raises(InvariantViolation):
        total([Line("p1", 100, qty)])
