"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from storefront.cart import Cart, MemoryCartStorage
from storefront.services.models import Product, ProductVariant


CART_KEY = "rtt-cart:test-session"


class FailingStorage:
    """Storage surface whose reads and/or writes raise."""

    def __init__(self, fail_get: bool = False, fail_set: bool = True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data = {}

    async def get(self, key):
        if self.fail_get:
            raise ConnectionError("redis unreachable")
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail_set:
            raise ConnectionError("redis unreachable")
        self.data[key] = value


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client; ``execute`` is awaitable."""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    return client


@pytest.fixture
def sample_product_row():
    """Sample ``products`` row"""
    return {
        "id": "p1",
        "name": "Tonkotsu Ramen Kit",
        "slug": "tonkotsu-ramen-kit",
        "sku": "RTT-TONK",
        "category": "ramen-bowl",
        "images": [
            {"url": "https://cdn.test/tonkotsu-side.jpg", "alt": "side"},
            {"url": "https://cdn.test/tonkotsu.jpg", "alt": "bowl", "isPrimary": True},
        ],
        "price_regular": 10.00,
        "stock": 40,
        "active": True,
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def sample_variant_row():
    """Sample ``product_variants`` row"""
    return {
        "id": "v-large",
        "product_id": "p1",
        "sku": "RTT-TONK-L",
        "name": "Large",
        "size": "large",
        "pack_quantity": 2,
        "price": "14.50",
        "active": True,
    }


@pytest.fixture
def product(sample_product_row):
    return Product(**sample_product_row)


@pytest.fixture
def variant(sample_variant_row):
    return ProductVariant(**sample_variant_row)


@pytest.fixture
def make_product():
    """Factory for products with a given id and price"""
    def _make(product_id="p1", price="10.00", name=None, **kwargs):
        return Product(
            id=product_id,
            name=name or f"Product {product_id}",
            slug=product_id,
            price_regular=price,
            **kwargs,
        )
    return _make


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def cart(storage):
    """Empty cart at the default 5% tax rate"""
    return Cart(storage, key=CART_KEY)
