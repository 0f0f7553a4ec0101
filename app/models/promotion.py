# app/models/promotion.py
import uuid
from datetime import date, datetime, timezone

from sqlmodel import SQLModel, Field


class Promotion(SQLModel, table=True):
    """
    Promo code that can be applied to a cashier cart.

    kind:
      - "percentage": value is 0-100, optionally capped by max_discount
      - "fixed": value is a Rupiah amount

    status:
      - active | scheduled | expired | draft
    """

    __tablename__ = "promotions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(max_length=100)

    code: str = Field(
        max_length=30,
        unique=True,
        index=True,
        description="Uppercase promo code",
    )

    description: str | None = None

    kind: str = Field(description="percentage | fixed")

    value: float = Field(ge=0)

    min_order: float = Field(
        default=0,
        ge=0,
        description="Minimum cart subtotal for the promo to apply",
    )

    max_discount: float | None = Field(
        default=None,
        ge=0,
        description="Cap for percentage discounts",
    )

    start_date: date
    end_date: date

    status: str = Field(
        default="draft",
        index=True,
    )

    usage_count: int = Field(default=0, ge=0)

    max_usage: int | None = Field(default=None, ge=1)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
