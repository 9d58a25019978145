from uuid import uuid4

from storefront.db import Base
from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship


class Cart(Base):
    __tablename__ = "carts"
    id = Column(String(32), primary_key=True, default=lambda: uuid4().hex)
    # one cart per user; concurrent first use relies on this constraint
    user_id = Column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="cart")
    lines = relationship(
        "CartLine", back_populates="cart", cascade="all, delete-orphan"
    )
