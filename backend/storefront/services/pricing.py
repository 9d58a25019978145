from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from storefront.services.errors import InvariantViolation

CENT = Decimal("0.01")


def cents_to_money(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT, rounding=ROUND_HALF_UP)


def total_cents(lines: Iterable) -> int:
    """
    Sum price_cents * quantity over `lines` (anything exposing those two
    attributes). Negative prices or quantities below 1 can only come from a
    broken invariant upstream and are rejected.
    """
    cents = 0
    for line in lines:
        if line.price_cents is None or line.price_cents < 0:
            raise InvariantViolation(f"Negative price on line for product {line.product_id}")
        if line.quantity is None or line.quantity < 1:
            raise InvariantViolation(f"Non-positive quantity on line for product {line.product_id}")
        cents += line.price_cents * line.quantity
    return cents


def total(lines: Iterable) -> Decimal:
    """Cart total rounded half-up to the cent; 0.00 for no lines."""
    return cents_to_money(total_cents(lines))
