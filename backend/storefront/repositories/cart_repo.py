from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.models.cart import Cart
from storefront.models.cart_line import CartLine
from storefront.models.product import Product
from storefront.utils.log import get_logger

log = get_logger("cart_repo")

_NO_SYNC = {"synchronize_session": False}


class CartRepository:
    """
    Store-level cart statements. Quantity changes are single UPDATE/INSERT/
    DELETE statements so concurrent requests never read-modify-write a line in
    Python; callers own the surrounding transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str, lock: bool = False) -> Optional[Cart]:
        stmt = select(Cart).where(Cart.user_id == user_id)
        if lock:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def get_or_create_for_user(self, user_id: str, lock: bool = False) -> Optional[Cart]:
        """
        Return the user's cart, inserting it on first use. Two first requests
        racing here both try the INSERT; the loser trips the unique user_id
        constraint inside its savepoint and re-reads the winner's row.
        """
        cart = self.get_by_user(user_id, lock=lock)
        if cart:
            return cart
        try:
            with self.db.begin_nested():
                cart = Cart(user_id=user_id)
                self.db.add(cart)
            log.info("created cart %s for user %s", cart.id, user_id)
            return cart
        except IntegrityError:
            log.debug("cart insert collided for user %s, re-reading", user_id)
        return self.get_by_user(user_id, lock=lock)

    def get_line(self, cart_id: str, product_id: str, lock: bool = False) -> Optional[CartLine]:
        stmt = select(CartLine).where(
            CartLine.cart_id == cart_id, CartLine.product_id == product_id
        )
        if lock:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt.execution_options(populate_existing=True)).scalars().first()

    def increment_line(self, cart_id: str, product_id: str, delta: int, limit: int) -> bool:
        """
        quantity = quantity + delta, evaluated by the database, only while the
        result stays <= limit. False means no line, or one that would overflow.
        """
        res = self.db.execute(
            update(CartLine)
            .where(
                CartLine.cart_id == cart_id,
                CartLine.product_id == product_id,
                CartLine.quantity <= limit - delta,
            )
            .values(quantity=CartLine.quantity + delta)
            .execution_options(**_NO_SYNC)
        )
        return res.rowcount > 0

    def decrement_line(self, cart_id: str, product_id: str, amount: int) -> bool:
        """
        Subtract `amount` only while the result stays >= 1. False means there
        is no line or it would be exhausted.
        """
        res = self.db.execute(
            update(CartLine)
            .where(
                CartLine.cart_id == cart_id,
                CartLine.product_id == product_id,
                CartLine.quantity > amount,
            )
            .values(quantity=CartLine.quantity - amount)
            .execution_options(**_NO_SYNC)
        )
        return res.rowcount > 0

    def insert_line(self, cart_id: str, product_id: str, quantity: int) -> bool:
        """Insert a new line; False if one for the product already exists."""
        try:
            with self.db.begin_nested():
                self.db.add(CartLine(cart_id=cart_id, product_id=product_id, quantity=quantity))
            return True
        except IntegrityError:
            log.debug("line insert collided for cart=%s product=%s", cart_id, product_id)
            return False

    def set_line_quantity(self, cart_id: str, product_id: str, quantity: int) -> bool:
        res = self.db.execute(
            update(CartLine)
            .where(CartLine.cart_id == cart_id, CartLine.product_id == product_id)
            .values(quantity=quantity)
            .execution_options(**_NO_SYNC)
        )
        return res.rowcount > 0

    def delete_line(self, cart_id: str, product_id: str) -> bool:
        res = self.db.execute(
            delete(CartLine)
            .where(CartLine.cart_id == cart_id, CartLine.product_id == product_id)
            .execution_options(**_NO_SYNC)
        )
        return res.rowcount > 0

    def clear(self, cart_id: str) -> int:
        res = self.db.execute(
            delete(CartLine).where(CartLine.cart_id == cart_id).execution_options(**_NO_SYNC)
        )
        return res.rowcount

    def list_lines(self, cart_id: str) -> List:
        """Current lines of the cart joined with their product, by product name."""
        stmt = (
            select(
                CartLine.id,
                CartLine.product_id,
                CartLine.quantity,
                Product.name,
                Product.price_cents,
                Product.image,
            )
            .join(Product, Product.id == CartLine.product_id)
            .where(CartLine.cart_id == cart_id)
            .order_by(Product.name, CartLine.id)
        )
        return list(self.db.execute(stmt).all())
