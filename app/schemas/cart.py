# app/schemas/cart.py
import uuid
from typing import Literal

from pydantic import ConfigDict, FiniteFloat, field_validator, model_validator
from sqlmodel import SQLModel, Field

ItemKind = Literal["product", "service"]
PromoKind = Literal["percentage", "fixed"]


# -------- Catalog (read-only input to the pricing engine) --------


class CatalogVariation(SQLModel):
    """
    One selectable variation of a catalog entry.
    """

    id: str
    name: str
    sku: str
    unit_price: float = Field(ge=0)


class CatalogEntry(SQLModel):
    """
    Already-fetched catalog data for a product or service.
    """

    id: str
    kind: ItemKind
    name: str
    sku: str
    unit_price: float = Field(ge=0)
    has_variations: bool = False
    variations: list[CatalogVariation] = []

    def find_variation(self, variation_id: str) -> CatalogVariation | None:
        for variation in self.variations:
            if variation.id == variation_id:
                return variation
        return None


# -------- Cart value objects --------


class LineItem(SQLModel):
    """
    One row in the cart.

    measure:
      - product => quantity (whole number, >= 1)
      - service => weight in kg (>= 0.5)

    subtotal is always unit_price * measure and is only written by
    the pricing engine.
    """

    id: str
    kind: ItemKind
    product_id: str
    variation_id: str | None = None
    name: str
    sku: str
    variation_name: str | None = None
    unit_price: float = Field(ge=0)
    measure: float
    subtotal: float


class PromoCode(SQLModel):
    """
    Discount applied to the whole cart.
    """

    id: str
    code: str
    kind: PromoKind
    value: float = Field(ge=0)
    min_order: float = Field(default=0, ge=0)
    max_discount: float | None = Field(default=None, ge=0)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v

    @model_validator(mode="after")
    def check_percentage(self) -> "PromoCode":
        if self.kind == "percentage" and self.value > 100:
            raise ValueError("percentage value must be between 0 and 100")
        return self


class Cart(SQLModel):
    """
    Cart aggregate: line items plus applied promos.
    Totals are never stored; see CartPricingEngine.get_totals().
    """

    items: list[LineItem] = []
    promos: list[PromoCode] = []


class CartTotals(SQLModel):
    subtotal: float
    discount: float
    total: float


class CheckoutSnapshot(SQLModel):
    """
    Payload handed to order creation once checkout completes.
    """

    items: list[LineItem]
    promos: list[PromoCode]
    subtotal: float
    discount: float
    total: float


class PromoOutcome(SQLModel):
    """
    Result of applying a promo code.

    ok=False carries a user-facing message; the cart is unchanged.
    """

    ok: bool
    message: str
    promo: PromoCode | None = None


# -------- API payloads --------


class CartRead(SQLModel):
    """
    Cashier cart response: contents plus computed totals.
    """

    id: uuid.UUID
    items: list[LineItem]
    promos: list[PromoCode]
    totals: CartTotals


class CartItemAdd(SQLModel):
    """
    Payload for adding a catalog entry to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    variation_id: uuid.UUID | None = None


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity/weight of a cart line.
    Values below the kind's minimum are clamped, not rejected.
    """

    model_config = ConfigDict(extra="forbid")

    measure: FiniteFloat


class PromoApply(SQLModel):
    """
    Payload for applying a promo code (case-insensitive).
    """

    model_config = ConfigDict(extra="forbid")

    code: str = ""
