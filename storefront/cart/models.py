"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront.services.money import parse_price, round_money, multiply

DEFAULT_VARIANT = "default"


def make_line_id(product_id: str, variant_id: Optional[str] = None) -> str:
    """Line id for a product+variant pair; the same pair always maps to the same line."""
    return f"{product_id}-{variant_id or DEFAULT_VARIANT}"


@dataclass
class LineItem:
    """One product+variant in the cart at a captured price."""
    id: str
    product_id: str
    unit_price: Decimal
    quantity: int
    variant_id: Optional[str] = None
    product_name: str = ""
    product_slug: str = ""
    variant_name: Optional[str] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        """Unit price times quantity, rounded to cents."""
        return round_money(multiply(self.unit_price, self.quantity))

    def to_dict(self) -> dict:
        """Convert to a JSON-safe dict; the price is kept as a string."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "product_name": self.product_name,
            "product_slug": self.product_slug,
            "variant_name": self.variant_name,
            "image_url": self.image_url,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """
        Create from a stored dict. The stored ``id`` is ignored and derived
        again from (product_id, variant_id) so one pair always maps to one line.

        Raises:
            KeyError: required field missing
            ValueError / TypeError: field present but invalid
        """
        product_id = data["product_id"]
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("product_id must be a non-empty string")

        variant_id = data.get("variant_id")
        if variant_id is not None and not isinstance(variant_id, str):
            raise TypeError("variant_id must be a string")

        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"invalid quantity: {quantity!r}")

        unit_price = parse_price(data["unit_price"])

        return cls(
            id=make_line_id(product_id, variant_id),
            product_id=product_id,
            variant_id=variant_id,
            unit_price=unit_price,
            quantity=quantity,
            product_name=data.get("product_name") or "",
            product_slug=data.get("product_slug") or "",
            variant_name=data.get("variant_name"),
            image_url=data.get("image_url"),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class CartTotals:
    """Derived cart figures. Never stored."""
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int
