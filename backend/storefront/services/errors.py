class CartError(Exception):
    """
    Base for every outcome the cart core reports to its caller.

    `kind` is stable and goes out on the wire; `status_code` is what the HTTP
    layer answers with.
    """

    kind = "CartError"
    status_code = 400

    def __init__(self, detail: str = None):
        self.detail = detail or self.__class__.__doc__.strip().splitlines()[0]
        super().__init__(self.detail)


class Unauthenticated(CartError):
    """No authenticated user."""

    kind = "Unauthenticated"
    status_code = 401


class ProductNotFound(CartError):
    """Product not found."""

    kind = "ProductNotFound"
    status_code = 404


class LineNotFound(CartError):
    """Cart item not found."""

    kind = "LineNotFound"
    status_code = 404


class EmptyCart(CartError):
    """Cart is empty."""

    kind = "EmptyCart"
    status_code = 400


class InvalidQuantity(CartError):
    """Quantity must not be negative."""

    kind = "InvalidQuantity"
    status_code = 422


class StorageUnavailable(CartError):
    """Storage unavailable, try again later."""

    kind = "StorageUnavailable"
    status_code = 503


class InvariantViolation(CartError):
    """Cart state is inconsistent."""

    kind = "InvariantViolation"
    status_code = 500
