from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.db import Base

# upper bound for one line; keeps every quantity and delta inside a 32-bit INTEGER
MAX_LINE_QUANTITY = 1000000


class CartLine(Base):
    __tablename__ = "cart_lines"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_lines_cart_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_lines_quantity_positive"),
        CheckConstraint(f"quantity <= {MAX_LINE_QUANTITY}", name="ck_cart_lines_quantity_max"),
    )

    id = Column(String(32), primary_key=True, default=lambda: uuid4().hex)
    cart_id = Column(
        String(32), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        String(32), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity = Column(Integer, nullable=False, default=1)

    cart = relationship("Cart", back_populates="lines")
    product = relationship("Product")
