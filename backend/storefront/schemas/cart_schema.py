from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.models.cart_line import MAX_LINE_QUANTITY

Outcome = Literal["created", "incremented", "decremented", "updated", "deleted", "unchanged"]


class CartLineOut(BaseModel):
    id: str
    product_id: str
    name: str
    image: Optional[str] = None
    price_cents: int
    price: Decimal
    quantity: int
    line_total: Decimal


class CartOut(BaseModel):
    cart_id: str
    items: List[CartLineOut]
    item_count: int
    total_cents: int
    total: Decimal


class CartMutationOut(CartOut):
    outcome: Outcome


class CheckoutOut(BaseModel):
    success: bool = True
    total: Decimal


class CartDeltaIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    # signed: positive adds, negative removes, zero is a no-op
    quantity: int = Field(..., ge=-MAX_LINE_QUANTITY, le=MAX_LINE_QUANTITY)


class SetQuantityIn(BaseModel):
    quantity: int = Field(..., ge=0, le=MAX_LINE_QUANTITY)
