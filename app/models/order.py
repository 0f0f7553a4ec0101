# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Laundry order created from a cashier cart at checkout.

    Totals are copied from the pricing engine snapshot; they are never
    recomputed from the stored items.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    invoice: str = Field(
        unique=True,
        index=True,
        description="Invoice number, INV<epoch millis>",
    )

    cashier_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    customer_name: str | None = None
    customer_phone: str | None = None

    is_quick_purchase: bool = Field(
        default=False,
        description="Walk-in sale without customer data",
    )

    # cash | qris | transfer
    payment_method: str = Field(default="cash")

    # paid | unpaid
    payment_status: str = Field(default="paid", index=True)

    # received | washing | drying | ironing | ready | completed | canceled
    status: str = Field(
        default="received",
        index=True,
        description="Laundry workflow status",
    )

    notes: str | None = None

    subtotal: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)
    total_amount: float = Field(
        ge=0,
        description="subtotal - discount, floored at zero",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Snapshot of a cart line item inside an order.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    line_id: str = Field(description="Cart line id (product or product_variation)")

    position: int = Field(default=0, ge=0, description="Row order in the cart")

    product_id: str
    variation_id: str | None = None

    kind: str = Field(description="product | service")
    name: str
    sku: str
    variation_name: str | None = None

    unit_price: float = Field(ge=0)

    # quantity for products, kg for services
    measure: float = Field(gt=0)

    subtotal: float = Field(ge=0)


class OrderPromotion(SQLModel, table=True):
    """
    Promo applied to an order, with the discount it contributed.
    """

    __tablename__ = "order_promotions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    promo_id: str
    code: str
    kind: str
    value: float
    discount_amount: float = Field(ge=0)
