from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.cart_line import MAX_LINE_QUANTITY
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart_schema import CartLineOut, CartMutationOut, CartOut
from storefront.services import pricing
from storefront.services.errors import (
    CartError,
    EmptyCart,
    InvalidQuantity,
    InvariantViolation,
    LineNotFound,
    ProductNotFound,
    StorageUnavailable,
    Unauthenticated,
)
from storefront.utils.auth import Identity
from storefront.utils.log import get_logger
from storefront.utils.transactions import smart_transaction

log = get_logger("cart")


def _check_quantity(value, lowest: int):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantity("Quantity must be an integer")
    if not lowest <= value <= MAX_LINE_QUANTITY:
        raise InvalidQuantity(f"Quantity must be between {lowest} and {MAX_LINE_QUANTITY}")


class CartService:
    """
    Cart mutation protocol for one authenticated shopper at a time.

    Every public operation runs in a single transaction, finishes with a fresh
    read of the cart's lines, and either returns that snapshot or raises a
    CartError with nothing left changed.
    """

    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[None]:
        try:
            with smart_transaction(self.db):
                yield
        except CartError as e:
            log.info("%s rejected: %s (%s)", operation, e.kind, e.detail)
            raise
        except SQLAlchemyError as e:
            log.error("%s failed on storage: %s", operation, e)
            raise StorageUnavailable() from e

    # -- resolver --------------------------------------------------------

    def _resolve(self, identity: Identity, lock: bool = False) -> str:
        if not isinstance(identity, Identity):
            raise Unauthenticated("Unauthorized")
        cart = self.cart_repo.get_or_create_for_user(identity.user_id, lock=lock)
        if cart is None:
            # the insert failed on the users foreign key, not on a racing insert
            raise Unauthenticated("Unknown user")
        return cart.id

    def resolve(self, identity: Identity) -> str:
        """Return the shopper's cart id, creating the cart on first use."""
        with self._unit_of_work("resolve"):
            return self._resolve(identity)

    # -- reads -----------------------------------------------------------

    def _snapshot(self, cart_id: str) -> CartOut:
        rows = self.cart_repo.list_lines(cart_id)
        seen = set()
        for r in rows:
            if r.product_id in seen:
                raise InvariantViolation(f"Duplicate line for product {r.product_id} in cart {cart_id}")
            seen.add(r.product_id)
        cents = pricing.total_cents(rows)
        items = [
            CartLineOut(
                id=r.id,
                product_id=r.product_id,
                name=r.name,
                image=r.image,
                price_cents=r.price_cents,
                price=pricing.cents_to_money(r.price_cents),
                quantity=r.quantity,
                line_total=pricing.cents_to_money(r.price_cents * r.quantity),
            )
            for r in rows
        ]
        return CartOut(
            cart_id=cart_id,
            items=items,
            item_count=sum(it.quantity for it in items),
            total_cents=cents,
            total=pricing.cents_to_money(cents),
        )

    def get_cart(self, identity: Identity) -> CartOut:
        with self._unit_of_work("get_cart"):
            return self._snapshot(self._resolve(identity))

    # -- reconciler ------------------------------------------------------

    def _require_product(self, product_id: str):
        if not product_id or not self.product_repo.exists(product_id):
            raise ProductNotFound(f"Product not found: {product_id}")

    def _increase(self, cart_id: str, product_id: str, delta: int) -> str:
        if self.cart_repo.increment_line(cart_id, product_id, delta, MAX_LINE_QUANTITY):
            return "incremented"
        if self.cart_repo.get_line(cart_id, product_id) is None and self.cart_repo.insert_line(
            cart_id, product_id, delta
        ):
            return "created"
        # the line exists: either it would overflow, or a concurrent request
        # inserted it after our first UPDATE
        if self.cart_repo.increment_line(cart_id, product_id, delta, MAX_LINE_QUANTITY):
            return "incremented"
        if self.cart_repo.get_line(cart_id, product_id) is not None:
            raise InvalidQuantity(f"A cart line holds at most {MAX_LINE_QUANTITY} units")
        raise StorageUnavailable("Cart line changed concurrently, try again")

    def _decrease(self, cart_id: str, product_id: str, amount: int) -> str:
        line = self.cart_repo.get_line(cart_id, product_id, lock=True)
        if line is None:
            raise LineNotFound(f"Cart item not found for product {product_id}")
        if self.cart_repo.decrement_line(cart_id, product_id, amount):
            return "decremented"
        self.cart_repo.delete_line(cart_id, product_id)
        return "deleted"

    def apply_delta(self, identity: Identity, product_id: str, delta: int) -> CartMutationOut:
        """
        Add (delta > 0) or take away (delta < 0) units of a product.

        A line that would drop to zero or below is deleted. Decreasing a
        product that isn't in the cart is a LineNotFound, and delta == 0 only
        returns the current cart.
        """
        _check_quantity(delta, -MAX_LINE_QUANTITY)
        with self._unit_of_work("apply_delta"):
            cart_id = self._resolve(identity, lock=True)
            self._require_product(product_id)
            if delta > 0:
                outcome = self._increase(cart_id, product_id, delta)
            elif delta < 0:
                outcome = self._decrease(cart_id, product_id, -delta)
            else:
                outcome = "unchanged"
            snapshot = self._snapshot(cart_id)
        log.info("cart=%s product=%s delta=%+d -> %s", cart_id, product_id, delta, outcome)
        return CartMutationOut(outcome=outcome, **snapshot.model_dump())

    def set_quantity(self, identity: Identity, product_id: str, quantity: int) -> CartMutationOut:
        """Set a line to an absolute quantity; 0 removes it."""
        _check_quantity(quantity, 0)
        with self._unit_of_work("set_quantity"):
            cart_id = self._resolve(identity, lock=True)
            self._require_product(product_id)
            if quantity == 0:
                if not self.cart_repo.delete_line(cart_id, product_id):
                    raise LineNotFound(f"Cart item not found for product {product_id}")
                outcome = "deleted"
            elif self.cart_repo.set_line_quantity(cart_id, product_id, quantity):
                outcome = "updated"
            elif self.cart_repo.insert_line(cart_id, product_id, quantity):
                outcome = "created"
            elif self.cart_repo.set_line_quantity(cart_id, product_id, quantity):
                outcome = "updated"
            else:
                raise StorageUnavailable("Cart line changed concurrently, try again")
            snapshot = self._snapshot(cart_id)
        log.info("cart=%s product=%s set quantity=%d -> %s", cart_id, product_id, quantity, outcome)
        return CartMutationOut(outcome=outcome, **snapshot.model_dump())

    def remove(self, identity: Identity, product_id: str) -> CartOut:
        with self._unit_of_work("remove"):
            cart_id = self._resolve(identity, lock=True)
            if not self.cart_repo.delete_line(cart_id, product_id):
                raise LineNotFound(f"Cart item not found for product {product_id}")
            snapshot = self._snapshot(cart_id)
        log.info("cart=%s product=%s removed", cart_id, product_id)
        return snapshot

    # -- checkout --------------------------------------------------------

    def checkout(self, identity: Identity) -> Decimal:
        """
        Bill the cart and clear it in one transaction. The cart row stays; no
        order record is written.
        """
        with self._unit_of_work("checkout"):
            cart_id = self._resolve(identity, lock=True)
            snapshot = self._snapshot(cart_id)
            if not snapshot.items:
                raise EmptyCart()
            cleared = self.cart_repo.clear(cart_id)
            if cleared != len(snapshot.items):
                raise InvariantViolation(
                    f"Cart {cart_id} changed during checkout: billed {len(snapshot.items)} lines, cleared {cleared}"
                )
        log.info("cart=%s checked out total=%s", cart_id, snapshot.total)
        return snapshot.total
