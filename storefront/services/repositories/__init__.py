"""
Repository Pattern for Database Operations

- ProductRepository: product and variant lookup for the cart
- OrderRepository: order creation at checkout
"""
from .product_repo import ProductRepository
from .order_repo import OrderRepository

__all__ = [
    "ProductRepository",
    "OrderRepository",
]
