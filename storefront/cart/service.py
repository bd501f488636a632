"""Cart: line items, mutations and snapshot persistence for one storage key."""
from decimal import Decimal
from typing import List, Optional, Tuple

from storefront import config
from storefront.errors import (
    InvalidQuantity,
    LineNotFound,
    PersistenceReadError,
    PersistenceWriteError,
)
from storefront.logging import get_logger, safe_log_id
from storefront.services.models import Product, ProductVariant
from storefront.services.money import to_decimal
from .models import CartTotals, LineItem, make_line_id
from .storage import CartStorage, load_items, save_items
from .totals import calculate_totals

logger = get_logger(__name__)


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(quantity)
    return quantity


class Cart:
    """
    Shopping cart bound to one key of a storage surface.

    Owned by the caller (a request, a session object, a test); there is no
    shared instance. Every successful mutation writes the full item list back
    to storage. Totals are recomputed from the items on every read.

    Usage:
        cart = await Cart.load(storage, "rtt-cart:abc")
        await cart.add_item(product, variant, quantity=2)
        cart.total
    """

    def __init__(
        self,
        storage: CartStorage,
        key: Optional[str] = None,
        items: Optional[List[LineItem]] = None,
        tax_rate: Optional[Decimal] = None,
    ):
        self.storage = storage
        self.key = key or config.CART_STORAGE_KEY
        self.tax_rate = config.TAX_RATE if tax_rate is None else to_decimal(tax_rate)
        self._items: List[LineItem] = list(items or [])

    @classmethod
    async def load(
        cls,
        storage: CartStorage,
        key: Optional[str] = None,
        tax_rate: Optional[Decimal] = None,
    ) -> "Cart":
        """
        Restore a cart from storage.

        Unreadable or corrupted data never reaches the caller: it is logged
        and the cart starts empty. The bad snapshot is left in place until
        the next mutation overwrites it.
        """
        cart = cls(storage, key=key, tax_rate=tax_rate)
        try:
            cart._items = await load_items(storage, cart.key)
        except PersistenceReadError as e:
            logger.warning(f"Resetting cart {safe_log_id(cart.key)}: {e}")
            cart._items = []
        return cart

    # ==================== READ ====================

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def totals(self) -> CartTotals:
        return calculate_totals(self._items, self.tax_rate)

    @property
    def subtotal(self) -> Decimal:
        return self.totals.subtotal

    @property
    def tax(self) -> Decimal:
        return self.totals.tax

    @property
    def total(self) -> Decimal:
        return self.totals.total

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_line_item(self, line_id: str) -> Optional[LineItem]:
        """Get a line by id, or None."""
        return next((item for item in self._items if item.id == line_id), None)

    # ==================== MUTATIONS ====================

    async def add_item(
        self,
        product: Product,
        variant: Optional[ProductVariant] = None,
        quantity: int = 1,
    ) -> LineItem:
        """
        Add a product (optionally a specific variant) to the cart.

        If the product+variant is already in the cart its quantity grows by
        ``quantity``; the price captured on the first add is kept. Otherwise a
        new line is appended at the current catalog price.

        Raises:
            InvalidQuantity: quantity is not a positive integer
            ValueError: catalog price is negative or not a number; the cart is left unchanged
        """
        quantity = _check_quantity(quantity)
        if quantity <= 0:
            raise InvalidQuantity(quantity)

        variant_id = variant.id if variant is not None else None
        line_id = make_line_id(product.id, variant_id)

        existing = self.get_line_item(line_id)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            snapshot = product.snapshot(variant)
            line = LineItem(
                id=line_id,
                product_id=product.id,
                variant_id=variant_id,
                unit_price=snapshot.unit_price,
                quantity=quantity,
                product_name=product.name,
                product_slug=product.slug,
                variant_name=variant.name if variant is not None else None,
                image_url=snapshot.image_url,
            )
            self._items.append(line)

        await self._persist()
        return line

    async def remove_item(self, line_id: str) -> bool:
        """Remove a line. Returns False (and writes nothing) if it was not there."""
        remaining = [item for item in self._items if item.id != line_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        await self._persist()
        return True

    async def update_quantity(self, line_id: str, quantity: int) -> Optional[LineItem]:
        """
        Set a line's quantity exactly. Zero or less removes the line.

        Returns:
            The updated line, or None if it was removed

        Raises:
            InvalidQuantity: quantity is not an integer
            LineNotFound: line missing and quantity > 0
        """
        quantity = _check_quantity(quantity)
        if quantity <= 0:
            await self.remove_item(line_id)
            return None

        line = self.get_line_item(line_id)
        if line is None:
            raise LineNotFound(line_id)

        line.quantity = quantity
        await self._persist()
        return line

    async def update_notes(self, line_id: str, notes: Optional[str]) -> LineItem:
        """
        Attach a note to a line (e.g. "no green onions"). Blank clears it.

        Raises:
            LineNotFound: line missing
        """
        line = self.get_line_item(line_id)
        if line is None:
            raise LineNotFound(line_id)

        line.notes = notes.strip() if notes and notes.strip() else None
        await self._persist()
        return line

    async def clear(self) -> None:
        """Empty the cart."""
        self._items = []
        await self._persist()

    # ==================== PERSISTENCE ====================

    async def _persist(self) -> None:
        try:
            await save_items(self.storage, self.key, self._items)
        except PersistenceWriteError as e:
            # the in-memory cart stays authoritative for this session
            logger.error(f"Cart {safe_log_id(self.key)} not saved: {e}")

    def to_summary(self) -> dict:
        """Items and totals as plain data (prices as Decimal)."""
        totals = self.totals
        return {
            "is_empty": self.is_empty,
            "items": [item.to_dict() for item in self._items],
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
            "item_count": totals.item_count,
        }
