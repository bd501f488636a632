"""
Cart snapshot storage.

A cart is stored as one JSON array of line items under one key and is
rewritten in full after every mutation. Two storage surfaces are provided:
Upstash Redis for deployments and a dict for tests and local runs.
"""
import json
from typing import Dict, List, Optional, Protocol, Sequence

from storefront.errors import PersistenceReadError, PersistenceWriteError
from .models import LineItem


class CartStorage(Protocol):
    """Durable key-value surface a cart persists to."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class RedisCartStorage:
    """Cart storage on top of the async Upstash Redis client. Keys never expire."""

    def __init__(self, redis):
        self.redis = redis

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(key, value)


class MemoryCartStorage:
    """In-process storage. Lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


def encode_items(items: Sequence[LineItem]) -> str:
    """Serialize the full item list for storage."""
    return json.dumps([item.to_dict() for item in items])


# camelCase keys written by the browser cart under "rtt-cart"
_BROWSER_KEYS = {
    "productId": "product_id",
    "variantId": "variant_id",
    "productName": "product_name",
    "productSlug": "product_slug",
    "variantName": "variant_name",
    "price": "unit_price",
    "image": "image_url",
}


def _normalize_entry(entry: dict) -> dict:
    """
    Map browser-written items onto the ``LineItem`` field names.

    Two older shapes exist: flat camelCase items (``productId``, ``price``)
    and items embedding the whole product row (``{"product": {...}, "price"}``).
    """
    if isinstance(entry.get("product"), dict):
        product = entry["product"]
        images = product.get("images") or []
        primary = next((img for img in images if isinstance(img, dict) and img.get("isPrimary")), None)
        if primary is None and images and isinstance(images[0], dict):
            primary = images[0]
        entry = {
            "product_id": product.get("id"),
            "unit_price": entry.get("price", product.get("price_regular")),
            "quantity": entry.get("quantity"),
            "product_name": product.get("name"),
            "product_slug": product.get("slug"),
            "image_url": primary.get("url") if primary else None,
            "notes": entry.get("notes"),
        }
    return {_BROWSER_KEYS.get(key, key): value for key, value in entry.items()}


def decode_items(raw: Optional[str]) -> List[LineItem]:
    """
    Parse a stored snapshot.

    Accepts a JSON array of items or a whole-cart object with an ``items``
    array (totals alongside it are ignored and recomputed). Items may use
    this package's field names or the browser cart's camelCase ones.
    Empty or missing data is an empty cart.

    Raises:
        PersistenceReadError: data is not valid JSON, has the wrong shape,
            contains an invalid item or repeats a line id
    """
    if raw is None or raw == "":
        return []

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise PersistenceReadError(str(e)) from e

    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise PersistenceReadError(f"expected a list of items, got {type(data).__name__}")

    items: List[LineItem] = []
    seen = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise PersistenceReadError(f"expected an item object, got {type(entry).__name__}")
        try:
            item = LineItem.from_dict(_normalize_entry(entry))
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise PersistenceReadError(f"invalid item: {e}") from e
        if item.id in seen:
            raise PersistenceReadError(f"duplicate line id: {item.id}")
        seen.add(item.id)
        items.append(item)

    return items


async def load_items(storage: CartStorage, key: str) -> List[LineItem]:
    """
    Read and decode the snapshot stored under ``key``.

    Raises:
        PersistenceReadError: storage failed or returned undecodable data
    """
    try:
        raw = await storage.get(key)
    except Exception as e:
        raise PersistenceReadError(f"storage read failed: {e}") from e
    return decode_items(raw)


async def save_items(storage: CartStorage, key: str, items: Sequence[LineItem]) -> None:
    """
    Overwrite the snapshot stored under ``key``.

    Raises:
        PersistenceWriteError: storage rejected the write
    """
    payload = encode_items(items)
    try:
        await storage.set(key, payload)
    except Exception as e:
        raise PersistenceWriteError(str(e)) from e
