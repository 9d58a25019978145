from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from storefront.db import Base

class Product(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),)

    id = Column(String(32), primary_key=True, default=lambda: uuid4().hex)
    name = Column(String(256), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    image = Column(String(512), nullable=True)

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
