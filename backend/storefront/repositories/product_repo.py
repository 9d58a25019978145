from typing import List, Optional, Tuple

from storefront.models.product import Product
from sqlalchemy import func
from sqlalchemy.orm import Session


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def exists(self, product_id: str) -> bool:
        return (
            self.db.query(func.count(Product.id)).filter(Product.id == product_id).scalar() or 0
        ) > 0

    def list(
        self, q: Optional[str] = None, page: int = 1, size: int = 12
    ) -> Tuple[List[Product], int]:
        query = self.db.query(Product)
        if q:
            # % and _ in the term match literally
            term = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            like = f"%{term}%"
            query = query.filter(
                (Product.name.ilike(like, escape="\\"))
                | (Product.description.ilike(like, escape="\\"))
            )
        total = query.with_entities(func.count(Product.id)).scalar() or 0
        items = (
            query.order_by(Product.name, Product.id)
            .offset((page - 1) * size)
            .limit(size)
            .all()
        )
        return items, total

    def get_by_name(self, name: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.name == name).first()

    def create_or_update(
        self,
        name: str,
        price_cents: int,
        description: str = None,
        image: str = None,
    ) -> Product:
        """Upsert keyed on product name; used by the catalogue seed."""
        p = self.get_by_name(name)
        if p:
            p.price_cents = price_cents
            p.description = description
            p.image = image
        else:
            p = Product(
                name=name,
                price_cents=price_cents,
                description=description,
                image=image,
            )
            self.db.add(p)
        self.db.flush()
        return p
