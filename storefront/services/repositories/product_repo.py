"""Product Repository - catalog reads for the cart."""
from typing import Optional

from .base import BaseRepository
from storefront.services.models import Product, ProductSnapshot, ProductVariant


class ProductRepository(BaseRepository):
    """Reads ``products`` and ``product_variants``."""

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        result = await self.client.table("products").select("*").eq("id", product_id).limit(1).execute()
        return Product(**result.data[0]) if result.data else None

    async def get_variant(self, product_id: str, variant_id: str) -> Optional[ProductVariant]:
        """Get a variant, only if it belongs to ``product_id``."""
        result = await (
            self.client.table("product_variants")
            .select("*")
            .eq("id", variant_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return ProductVariant(**result.data[0]) if result.data else None

    async def lookup(self, product_id: str, variant_id: Optional[str] = None) -> Optional[ProductSnapshot]:
        """Current price and display data, or None if the product or variant is unknown."""
        product = await self.get_by_id(product_id)
        if product is None:
            return None

        variant = None
        if variant_id:
            variant = await self.get_variant(product_id, variant_id)
            if variant is None:
                return None

        return product.snapshot(variant)
