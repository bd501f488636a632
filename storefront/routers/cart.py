"""
Cart Router

Shopping cart and checkout endpoints. The cart belongs to the anonymous
session named in the ``X-Cart-Session`` header.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.cart import Cart
from storefront.checkout import checkout
from storefront.errors import (
    ERROR_CART_EMPTY,
    ERROR_PRODUCT_INACTIVE,
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_VARIANT_NOT_FOUND,
    CheckoutError,
    InvalidQuantity,
    LineNotFound,
)
from storefront.logging import get_logger, safe_log_id
from storefront.services.money import to_float
from storefront.services.repositories import OrderRepository, ProductRepository
from .deps import get_cart, get_order_repository, get_product_repository
from .models import (
    AddToCartRequest,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    UpdateNotesRequest,
    UpdateQuantityRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
async def get_cart_contents(cart: Cart = Depends(get_cart)):
    """Get the session's cart with totals."""
    return CartResponse.from_cart(cart)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    cart: Cart = Depends(get_cart),
    products: ProductRepository = Depends(get_product_repository),
):
    """Add a product (or one of its variants) to the cart."""
    product = await products.get_by_id(request.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    if not product.active:
        raise HTTPException(status_code=400, detail=ERROR_PRODUCT_INACTIVE)

    variant = None
    if request.variant_id:
        variant = await products.get_variant(request.product_id, request.variant_id)
        if variant is None:
            raise HTTPException(status_code=404, detail=ERROR_VARIANT_NOT_FOUND)
        if not variant.active:
            raise HTTPException(status_code=400, detail=ERROR_PRODUCT_INACTIVE)

    try:
        await cart.add_item(product, variant, quantity=request.quantity)
    except InvalidQuantity as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CartResponse.from_cart(cart)


@router.patch("/items/{line_id}", response_model=CartResponse)
async def update_cart_item(line_id: str, request: UpdateQuantityRequest, cart: Cart = Depends(get_cart)):
    """Set a line's quantity (0 = remove)."""
    try:
        await cart.update_quantity(line_id, request.quantity)
    except LineNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidQuantity as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CartResponse.from_cart(cart)


@router.patch("/items/{line_id}/notes", response_model=CartResponse)
async def update_cart_item_notes(line_id: str, request: UpdateNotesRequest, cart: Cart = Depends(get_cart)):
    """Set or clear the note on a line."""
    try:
        await cart.update_notes(line_id, request.notes)
    except LineNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return CartResponse.from_cart(cart)


@router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_cart_item(line_id: str, cart: Cart = Depends(get_cart)):
    """Remove a line. Removing a missing line is not an error."""
    await cart.remove_item(line_id)
    return CartResponse.from_cart(cart)


@router.delete("", response_model=CartResponse)
async def clear_cart(cart: Cart = Depends(get_cart)):
    """Empty the cart."""
    await cart.clear()
    return CartResponse.from_cart(cart)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout_cart(
    request: CheckoutRequest,
    cart: Cart = Depends(get_cart),
    orders: OrderRepository = Depends(get_order_repository),
):
    """Create an order from the cart; the cart is emptied only if the order is stored."""
    if cart.is_empty:
        raise HTTPException(status_code=400, detail=ERROR_CART_EMPTY)

    try:
        order = await checkout(cart, request, orders.create)
    except CheckoutError as e:
        logger.warning(f"Checkout failed for {safe_log_id(cart.key)}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return CheckoutResponse(
        order_id=order.id,
        order_number=order.order_number,
        status=order.status,
        total=to_float(order.total),
    )
