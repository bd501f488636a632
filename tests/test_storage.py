"""Tests for cart snapshot storage"""
import json
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from storefront.cart import LineItem, MemoryCartStorage, RedisCartStorage
from storefront.cart.storage import decode_items, encode_items, load_items, save_items
from storefront.errors import PersistenceReadError, PersistenceWriteError
from tests.conftest import CART_KEY, FailingStorage


def _items():
    return [
        LineItem(id="p1-default", product_id="p1", unit_price=Decimal("10.00"), quantity=2,
                 product_name="Tonkotsu Ramen Kit"),
        LineItem(id="p2-v1", product_id="p2", variant_id="v1", unit_price=Decimal("3.25"), quantity=1,
                 variant_name="Small", notes="no sesame"),
    ]


class TestDecode:
    """Tests for decode_items."""

    @pytest.mark.parametrize("raw", [None, ""])
    def test_nothing_stored(self, raw):
        assert decode_items(raw) == []

    def test_empty_list(self):
        assert decode_items("[]") == []

    def test_encoded_snapshot_decodes(self):
        decoded = decode_items(encode_items(_items()))

        assert decoded == _items()

    def test_whole_cart_object_form(self):
        raw = json.dumps({
            "items": [{"id": "p1-default", "product_id": "p1", "unit_price": 10, "quantity": 2}],
            "subtotal": 20, "tax": 1, "total": 21, "itemCount": 2,
        })

        items = decode_items(raw)

        assert len(items) == 1
        assert items[0].unit_price == Decimal("10")

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "42",
            '"a string"',
            "[1, 2]",
            '[{"product_id": "p1", "quantity": 1}]',
            '[{"product_id": "p1", "unit_price": "abc", "quantity": 1}]',
            '[{"product_id": "p1", "unit_price": "NaN", "quantity": 1}]',
            '[{"product_id": "", "unit_price": "1", "quantity": 1}]',
            '{"items": "nope"}',
        ],
    )
    def test_malformed_raises_read_error(self, raw):
        with pytest.raises(PersistenceReadError):
            decode_items(raw)

    def test_stored_id_is_rederived(self):
        raw = json.dumps([{"id": "legacy-1", "product_id": "p1", "unit_price": "10.00", "quantity": 2}])

        assert [item.id for item in decode_items(raw)] == ["p1-default"]

    def test_same_pair_under_two_ids_is_a_duplicate(self):
        raw = json.dumps([
            {"id": "legacy-1", "product_id": "p1", "unit_price": "10.00", "quantity": 2},
            {"id": "p1-default", "product_id": "p1", "unit_price": "10.00", "quantity": 1},
        ])

        with pytest.raises(PersistenceReadError, match="duplicate"):
            decode_items(raw)

    def test_browser_camel_case_items(self):
        raw = json.dumps([{
            "id": "p1-LG-SKU",
            "productId": "p1",
            "productName": "Tonkotsu Ramen Kit",
            "productSlug": "tonkotsu-ramen-kit",
            "variantId": "v-large",
            "variantName": "Large",
            "price": 14.5,
            "quantity": 2,
            "image": "https://cdn.test/tonkotsu.jpg",
        }])

        [item] = decode_items(raw)

        assert item.id == "p1-v-large"
        assert item.unit_price == Decimal("14.5")
        assert item.product_slug == "tonkotsu-ramen-kit"
        assert item.variant_name == "Large"
        assert item.image_url == "https://cdn.test/tonkotsu.jpg"

    def test_browser_items_with_embedded_product(self):
        raw = json.dumps({
            "items": [{
                "id": "p1",
                "product": {
                    "id": "p1",
                    "name": "Tonkotsu Ramen Kit",
                    "slug": "tonkotsu-ramen-kit",
                    "price_regular": 10,
                    "images": [{"url": "https://cdn.test/a.jpg"}, {"url": "https://cdn.test/b.jpg", "isPrimary": True}],
                },
                "quantity": 3,
                "price": 10,
            }],
            "subtotal": 30, "tax": 1.5, "total": 31.5, "itemCount": 3,
        })

        [item] = decode_items(raw)

        assert item.id == "p1-default"
        assert item.quantity == 3
        assert item.unit_price == Decimal("10")
        assert item.product_name == "Tonkotsu Ramen Kit"
        assert item.image_url == "https://cdn.test/b.jpg"

    def test_embedded_product_without_id_rejected(self):
        raw = json.dumps([{"product": {"name": "Mystery"}, "quantity": 1, "price": 5}])

        with pytest.raises(PersistenceReadError):
            decode_items(raw)

    def test_duplicate_line_ids_rejected(self):
        line = {"id": "p1-default", "product_id": "p1", "unit_price": "1.00", "quantity": 1}

        with pytest.raises(PersistenceReadError, match="duplicate"):
            decode_items(json.dumps([line, line]))


class TestEncode:
    """Tests for encode_items."""

    def test_prices_are_strings(self):
        data = json.loads(encode_items(_items()))

        assert data[0]["unit_price"] == "10.00"
        assert data[1]["notes"] == "no sesame"

    def test_order_preserved(self):
        data = json.loads(encode_items(_items()))

        assert [entry["id"] for entry in data] == ["p1-default", "p2-v1"]


class TestLoadSave:
    """Tests for load_items / save_items against storage surfaces."""

    @pytest.mark.asyncio
    async def test_save_then_load(self):
        storage = MemoryCartStorage()

        await save_items(storage, CART_KEY, _items())
        loaded = await load_items(storage, CART_KEY)

        assert loaded == _items()

    @pytest.mark.asyncio
    async def test_save_overwrites_full_snapshot(self):
        storage = MemoryCartStorage()
        await save_items(storage, CART_KEY, _items())

        await save_items(storage, CART_KEY, _items()[:1])

        assert len(json.loads(storage.data[CART_KEY])) == 1

    @pytest.mark.asyncio
    async def test_read_failure(self):
        with pytest.raises(PersistenceReadError):
            await load_items(FailingStorage(fail_get=True), CART_KEY)

    @pytest.mark.asyncio
    async def test_write_failure(self):
        with pytest.raises(PersistenceWriteError):
            await save_items(FailingStorage(fail_set=True), CART_KEY, _items())


class TestRedisCartStorage:
    """Tests for the Upstash-backed storage."""

    @pytest.mark.asyncio
    async def test_get_and_set_delegate_to_redis(self):
        redis = Mock()
        redis.get = AsyncMock(return_value="[]")
        redis.set = AsyncMock(return_value="OK")
        storage = RedisCartStorage(redis)

        assert await storage.get(CART_KEY) == "[]"
        await storage.set(CART_KEY, "[1]")

        redis.get.assert_awaited_once_with(CART_KEY)
        redis.set.assert_awaited_once_with(CART_KEY, "[1]")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        redis = Mock()
        redis.get = AsyncMock(return_value=None)

        assert await load_items(RedisCartStorage(redis), CART_KEY) == []
