# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry sold at the cashier.

    kind:
      - "product": counted goods (detergent, perfume), priced per unit
      - "service": laundry service, priced per kg
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        min_length=3,
        index=True,
    )

    sku: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Stock keeping unit (unique across products and variations)",
    )

    # product | service
    kind: str = Field(
        index=True,
        description="product | service",
    )

    category: str = Field(
        max_length=50,
        description="Catalog category, e.g. Cuci, Setrika, Parfum",
    )

    price: float = Field(
        default=0,
        ge=0,
        description="Unit price in Rupiah (per item, or per kg for services)",
    )

    stock: int = Field(
        default=0,
        ge=0,
    )

    description: str | None = None

    has_variations: bool = Field(
        default=False,
        description="When true the cashier must pick a variation",
    )

    is_active: bool = Field(
        default=True,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class ProductVariation(SQLModel, table=True):
    """
    Sellable variant of a product (size, scent...), with its own price and SKU.
    """

    __tablename__ = "product_variations"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    name: str = Field(max_length=100)

    sku: str = Field(
        max_length=60,
        unique=True,
        index=True,
    )

    price: float = Field(ge=0)

    stock: int = Field(default=0, ge=0)

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the product",
    )
