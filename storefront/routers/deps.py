"""
Shared Dependencies for Routers

Storage and repositories are resolved per request so tests can swap them
through ``app.dependency_overrides``.
"""
from fastapi import Depends, Header, HTTPException

from storefront import config
from storefront.cart import Cart, CartStorage, RedisCartStorage
from storefront.db import StorageKeys, get_redis, get_supabase
from storefront.errors import ERROR_SESSION_REQUIRED
from storefront.services.repositories import OrderRepository, ProductRepository


def get_cart_storage() -> CartStorage:
    return RedisCartStorage(get_redis())


async def get_product_repository() -> ProductRepository:
    return ProductRepository(await get_supabase())


async def get_order_repository() -> OrderRepository:
    return OrderRepository(await get_supabase())


def get_session_id(x_cart_session: str | None = Header(default=None, alias=config.CART_SESSION_HEADER)) -> str:
    """Anonymous session id from the ``X-Cart-Session`` header."""
    session_id = (x_cart_session or "").strip()
    if not session_id or len(session_id) > 128:
        raise HTTPException(status_code=400, detail=ERROR_SESSION_REQUIRED)
    return session_id


async def get_cart(
    session_id: str = Depends(get_session_id),
    storage: CartStorage = Depends(get_cart_storage),
) -> Cart:
    """Load the session's cart; a new Cart instance per request."""
    return await Cart.load(storage, StorageKeys.cart_key(config.CART_STORAGE_KEY, session_id))
