# app/schemas/product.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

ProductKind = Literal["product", "service"]

SKU_PATTERN = re.compile(r"^[A-Z0-9-]+$")


def _strip_not_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


def _check_sku(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().upper()
    if not SKU_PATTERN.match(v):
        raise ValueError("SKU may only contain uppercase letters, digits and hyphens")
    return v


class VariationInput(SQLModel):
    """
    Variation as sent by the admin form.

    - sku is optional: if omitted, generated as <product sku>-V01, -V02...
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    sku: str | None = Field(default=None, max_length=60)
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_not_empty(v)

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        return _check_sku(v)


class VariationRead(SQLModel):
    id: uuid.UUID
    name: str
    sku: str
    price: float
    stock: int
    sort_order: int


class ProductCreate(SQLModel):
    """
    Payload for creating a product or service.

    - sku is optional: if omitted, generated from kind + name.
    - has_variations=True requires at least one variation.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=3, max_length=100)
    sku: str | None = Field(default=None, max_length=50)
    kind: ProductKind
    category: str = Field(max_length=50)
    price: float = Field(default=0, ge=0)
    stock: int = Field(default=0, ge=0)
    description: str | None = None
    has_variations: bool = False
    variations: list[VariationInput] = []
    is_active: bool = True

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_not_empty(v)

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        return _check_sku(v)


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; `variations`, when given, replaces the list.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=3, max_length=100)
    sku: str | None = Field(default=None, max_length=50)
    category: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    description: str | None = None
    has_variations: bool | None = None
    variations: list[VariationInput] | None = None
    is_active: bool | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_not_empty(v)

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        return _check_sku(v)


class ProductRead(SQLModel):
    """
    Product representation for the catalog / cashier screen.
    """

    id: uuid.UUID
    name: str
    sku: str
    kind: ProductKind
    category: str
    price: float
    stock: int
    description: str | None
    has_variations: bool
    is_active: bool
    created_at: datetime
    variations: list[VariationRead] = []
