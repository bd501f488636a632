"""Cart package: models, totals, storage, and the Cart itself."""
from .models import LineItem, CartTotals, make_line_id
from .totals import calculate_totals
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage
from .service import Cart

__all__ = [
    "LineItem",
    "CartTotals",
    "make_line_id",
    "calculate_totals",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "Cart",
]
