"""
Cart and checkout errors.

Message constants are shared between the raising code and the HTTP layer so
the same text is never duplicated (SonarQube S1192).
"""

# Cart errors
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"
ERROR_LINE_NOT_FOUND = "Cart line not found"
ERROR_PERSISTENCE_READ = "Stored cart data is unreadable"
ERROR_PERSISTENCE_WRITE = "Failed to persist cart"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_VARIANT_NOT_FOUND = "Product variant not found"
ERROR_PRODUCT_INACTIVE = "Product is not available for order"

# Checkout errors
ERROR_CART_EMPTY = "Cart is empty"
ERROR_ADDRESS_REQUIRED = "Delivery address is required for delivery orders"
ERROR_ORDER_FAILED = "Failed to create order"

# Generic errors
ERROR_SESSION_REQUIRED = "Cart session header is required"


class CartError(ValueError):
    """Base class for all cart errors. Local and recoverable."""


class InvalidQuantity(CartError):
    """Requested quantity is not a positive integer."""

    def __init__(self, quantity=None):
        self.quantity = quantity
        super().__init__(ERROR_INVALID_QUANTITY)


class LineNotFound(CartError):
    """Mutation targeted a line id that is not in the cart."""

    def __init__(self, line_id: str):
        self.line_id = line_id
        super().__init__(f"{ERROR_LINE_NOT_FOUND}: {line_id}")


class PersistenceReadError(CartError):
    """Storage returned data that could not be decoded into line items."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{ERROR_PERSISTENCE_READ}: {detail}" if detail else ERROR_PERSISTENCE_READ)


class PersistenceWriteError(CartError):
    """Storage rejected a snapshot write."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{ERROR_PERSISTENCE_WRITE}: {detail}" if detail else ERROR_PERSISTENCE_WRITE)


class CheckoutError(CartError):
    """Checkout could not be completed; the cart is left untouched."""
