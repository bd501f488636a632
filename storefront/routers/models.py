"""
Cart API Pydantic Models

Request and response bodies for the cart endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.cart import Cart, LineItem
from storefront.checkout import CheckoutDetails
from storefront.services.money import to_float


# ==================== REQUESTS ====================

class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    variant_id: Optional[str] = None
    quantity: int = Field(default=1, gt=0)


class UpdateQuantityRequest(BaseModel):
    quantity: int  # 0 or less removes the line


class UpdateNotesRequest(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=500)


class CheckoutRequest(CheckoutDetails):
    pass


# ==================== RESPONSES ====================

class LineItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str
    product_slug: str
    variant_name: Optional[str] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
    quantity: int
    unit_price: float
    line_total: float

    @classmethod
    def from_line(cls, item: LineItem) -> "LineItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            product_name=item.product_name,
            product_slug=item.product_slug,
            variant_name=item.variant_name,
            image_url=item.image_url,
            notes=item.notes,
            quantity=item.quantity,
            unit_price=to_float(item.unit_price),
            line_total=to_float(item.line_total),
        )


class CartResponse(BaseModel):
    items: List[LineItemResponse]
    subtotal: float
    tax: float
    total: float
    item_count: int

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        totals = cart.totals
        return cls(
            items=[LineItemResponse.from_line(item) for item in cart.items],
            subtotal=to_float(totals.subtotal),
            tax=to_float(totals.tax),
            total=to_float(totals.total),
            item_count=totals.item_count,
        )


class CheckoutResponse(BaseModel):
    success: bool = True
    order_id: str
    order_number: str
    status: str
    total: float
