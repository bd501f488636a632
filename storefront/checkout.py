"""
Checkout - turning a cart into an order-creation request.

The cart never talks to the order store itself. ``checkout`` builds the
request, hands it to a caller-supplied ``submit`` coroutine and clears the
cart only once that coroutine returns.
"""
import random
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field, model_validator

from storefront import config
from storefront.cart import Cart
from storefront.errors import ERROR_ADDRESS_REQUIRED, ERROR_CART_EMPTY, ERROR_ORDER_FAILED, CheckoutError
from storefront.logging import get_logger
from storefront.services.money import ZERO, add, round_money

logger = get_logger(__name__)

T = TypeVar("T")


class DeliveryMethod(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    SHIPPING = "shipping"


class CustomerInfo(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None


class DeliveryAddress(BaseModel):
    address_line1: str = Field(min_length=1)
    address_line2: Optional[str] = None
    city: str
    province: str
    postal_code: str
    country: str = "Canada"


class CheckoutDetails(BaseModel):
    """Everything checkout needs besides the cart."""
    customer: CustomerInfo
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    delivery_address: Optional[DeliveryAddress] = None
    delivery_time_slot: Optional[str] = None
    payment_id: Optional[str] = None
    payment_method: str = "card"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def require_address_for_delivery(self):
        if self.delivery_method == DeliveryMethod.DELIVERY and self.delivery_address is None:
            raise ValueError(ERROR_ADDRESS_REQUIRED)
        return self


class OrderItem(BaseModel):
    line_id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str
    variant_name: Optional[str] = None
    quantity: int = Field(gt=0)
    price: Decimal
    notes: Optional[str] = None


class CreateOrderRequest(BaseModel):
    """Payload sent to the order store."""
    order_number: str
    customer: CustomerInfo
    items: List[OrderItem]
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal
    delivery_method: DeliveryMethod
    delivery_address: Optional[DeliveryAddress] = None
    delivery_time_slot: Optional[str] = None
    payment_id: Optional[str] = None
    payment_method: str = "card"
    notes: Optional[str] = None


def generate_order_number(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Human-facing order number, e.g. ``RTT-20261018-0421``.

    Not guaranteed unique; the orders table enforces uniqueness.
    """
    now = now or datetime.now(timezone.utc)
    suffix = (rng or random).randint(0, 9999)
    return f"{config.ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix:04d}"


def delivery_fee_for(method: DeliveryMethod) -> Decimal:
    if method == DeliveryMethod.DELIVERY:
        return round_money(config.DELIVERY_FEE)
    return ZERO


def build_order_request(cart: Cart, details: CheckoutDetails, order_number: Optional[str] = None) -> CreateOrderRequest:
    """
    Snapshot the cart into an order request.

    Raises:
        CheckoutError: cart is empty
    """
    if cart.is_empty:
        raise CheckoutError(ERROR_CART_EMPTY)

    totals = cart.totals
    fee = delivery_fee_for(details.delivery_method)

    items = [
        OrderItem(
            line_id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            product_name=item.product_name or item.product_id,
            variant_name=item.variant_name,
            quantity=item.quantity,
            price=item.unit_price,
            notes=item.notes,
        )
        for item in cart.items
    ]

    return CreateOrderRequest(
        order_number=order_number or generate_order_number(),
        customer=details.customer,
        items=items,
        subtotal=totals.subtotal,
        tax=totals.tax,
        delivery_fee=fee,
        total=round_money(add(totals.total, fee)),
        delivery_method=details.delivery_method,
        delivery_address=details.delivery_address,
        delivery_time_slot=details.delivery_time_slot,
        payment_id=details.payment_id,
        payment_method=details.payment_method,
        notes=details.notes,
    )


async def checkout(
    cart: Cart,
    details: CheckoutDetails,
    submit: Callable[[CreateOrderRequest], Awaitable[T]],
) -> T:
    """
    Submit the cart as an order and clear it on success.

    Raises:
        CheckoutError: cart is empty or ``submit`` failed (cart left intact)
    """
    request = build_order_request(cart, details)

    try:
        result = await submit(request)
    except Exception as e:
        logger.error(f"Order {request.order_number} submission failed: {e}", exc_info=True)
        raise CheckoutError(ERROR_ORDER_FAILED) from e

    logger.info(f"Order {request.order_number} created, {len(request.items)} lines, total {request.total}")
    await cart.clear()
    return result
