"""Database Models - Pydantic models for catalog rows."""
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, field_validator

from storefront.services.money import parse_price, to_decimal as _to_decimal


class ProductImage(BaseModel):
    """Entry of the ``products.images`` JSONB array."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str
    alt: str = ""
    is_primary: bool = False

    @field_validator("is_primary", mode="before")
    @classmethod
    def default_primary(cls, v):
        return bool(v)


class ProductVariant(BaseModel):
    """Row of ``product_variants`` (size / pack options of a product)."""
    model_config = ConfigDict(extra="ignore")

    id: str
    product_id: Optional[str] = None
    sku: Optional[str] = None
    name: str
    price: Optional[Decimal] = None
    active: bool = True

    @field_validator("price", mode="before")
    @classmethod
    def convert_price(cls, v):
        return None if v is None else parse_price(v)


class ProductSnapshot(BaseModel):
    """What the cart needs from the catalog at the moment an item is added."""
    unit_price: Decimal
    display_name: str
    image_url: Optional[str] = None

    @field_validator("unit_price", mode="before")
    @classmethod
    def check_price(cls, v):
        return parse_price(v)


class Product(BaseModel):
    """Row of ``products``."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str = ""
    sku: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    images: List[ProductImage] = []
    price_regular: Decimal
    active: bool = True

    @field_validator("price_regular", mode="before")
    @classmethod
    def convert_price(cls, v):
        return parse_price(v)

    @field_validator("images", mode="before")
    @classmethod
    def normalize_images(cls, v):
        if not v:
            return []
        images = []
        for img in v:
            if isinstance(img, dict) and "isPrimary" in img and "is_primary" not in img:
                img = {**img, "is_primary": img["isPrimary"]}
            images.append(img)
        return images

    @property
    def primary_image_url(self) -> Optional[str]:
        """Primary image, else the first one."""
        if not self.images:
            return None
        primary = next((img for img in self.images if img.is_primary), self.images[0])
        return primary.url

    def snapshot(self, variant: Optional[ProductVariant] = None) -> ProductSnapshot:
        """Price and display data for this product, optionally narrowed to a variant."""
        if variant is not None and variant.price is not None:
            unit_price = variant.price
        else:
            unit_price = self.price_regular
        display_name = f"{self.name} ({variant.name})" if variant is not None else self.name
        return ProductSnapshot(
            unit_price=unit_price,
            display_name=display_name,
            image_url=self.primary_image_url,
        )


class Order(BaseModel):
    """Row of ``orders`` as returned after insert."""
    model_config = ConfigDict(extra="ignore")

    id: str
    order_number: str
    status: str = "pending"
    payment_status: str = "pending"
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    @field_validator("subtotal", "tax", "total", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)
