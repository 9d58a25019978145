# backend/storefront/schemas/product_schema.py
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, computed_field
from pydantic import ConfigDict

from storefront.services.pricing import cents_to_money

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: Optional[str] = None
    price_cents: int
    image: Optional[str] = None

    @computed_field
    @property
    def price(self) -> Decimal:
        return cents_to_money(self.price_cents)


class ProductPage(BaseModel):
    items: List[ProductOut]
    total: int
    page: int
    size: int
    total_pages: int
