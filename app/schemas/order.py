# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

PaymentMethod = Literal["cash", "qris", "transfer"]
PaymentStatus = Literal["paid", "unpaid"]
OrderStatus = Literal[
    "received",
    "washing",
    "drying",
    "ironing",
    "ready",
    "completed",
    "canceled",
]


class CheckoutRequest(SQLModel):
    """
    Payload for turning a cashier cart into an order.

    Cashier provides:
      - customer_name / customer_phone (unless is_quick_purchase)
      - payment_method, payment_status
      - notes (optional)

    Backend derives:
      - items, promos and totals from the cart
      - invoice number and cashier_id
      - status = 'received'
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str | None = None
    customer_phone: str | None = None
    is_quick_purchase: bool = False
    payment_method: PaymentMethod = "cash"
    payment_status: PaymentStatus = "paid"
    notes: str | None = None

    @field_validator("customer_name", "customer_phone", "notes")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    invoice: str
    cashier_id: uuid.UUID
    customer_name: str | None
    customer_phone: str | None
    is_quick_purchase: bool
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    status: OrderStatus
    notes: str | None
    subtotal: float
    discount: float
    total_amount: float
    created_at: datetime


class OrderItemRead(SQLModel):
    id: uuid.UUID
    line_id: str
    product_id: str
    variation_id: str | None
    kind: str
    name: str
    sku: str
    variation_name: str | None
    unit_price: float
    measure: float
    subtotal: float


class OrderPromotionRead(SQLModel):
    promo_id: str
    code: str
    kind: str
    value: float
    discount_amount: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items and applied promos.
    """

    items: list[OrderItemRead]
    promos: list[OrderPromotionRead]


class OrderStatusUpdate(SQLModel):
    """
    Payload to move an order along the laundry workflow.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class PaymentStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    payment_status: PaymentStatus
