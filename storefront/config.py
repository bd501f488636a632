"""
Storefront configuration.

Values come from environment variables and are read once at import time.
Client credentials (Supabase, Upstash) live in ``storefront.db``.
"""
import os
from decimal import Decimal

from storefront.services.money import parse_price

# 5% GST (Alberta). Bad TAX_RATE / DELIVERY_FEE values fail at import
DEFAULT_TAX_RATE = Decimal("0.05")

TAX_RATE: Decimal = parse_price(os.environ.get("TAX_RATE", str(DEFAULT_TAX_RATE)))

# Storage key for the cart snapshot; HTTP sessions get ":{session_id}" appended
CART_STORAGE_KEY: str = os.environ.get("CART_STORAGE_KEY", "rtt-cart")

# Flat fee charged for local delivery; pickup and shipping are free at checkout
DELIVERY_FEE: Decimal = parse_price(os.environ.get("DELIVERY_FEE", "5.00"))

ORDER_NUMBER_PREFIX: str = os.environ.get("ORDER_NUMBER_PREFIX", "RTT")

# Header carrying the anonymous cart session id
CART_SESSION_HEADER = "X-Cart-Session"
