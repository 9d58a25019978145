from uuid import uuid4

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import relationship

from storefront.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=lambda: uuid4().hex)
    email = Column(String(320), unique=True, index=True, nullable=False)
    name = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cart = relationship("Cart", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
