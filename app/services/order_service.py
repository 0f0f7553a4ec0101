# app/services/order_service.py
import logging
import time
import uuid
from datetime import date

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.order import Order, OrderItem, OrderPromotion
from app.models.promotion import Promotion
from app.repositories.order_repo import OrderRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.cart import CheckoutSnapshot
from app.schemas.order import (
    CheckoutRequest,
    OrderItemRead,
    OrderPromotionRead,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
    PaymentStatusUpdate,
)
from app.services.cart_pricing import promo_discount
from app.services.cart_store import CartSessionStore
from app.services.cashier_service import build_engine, get_cart_or_404
from app.services.lookups import is_redeemable

logger = logging.getLogger(__name__)

# Laundry workflow, in order. An order may skip ahead but never go back.
STATUS_FLOW: list[str] = [
    "received",
    "washing",
    "drying",
    "ironing",
    "ready",
    "completed",
]
TERMINAL_STATUSES = {"completed", "canceled"}


def next_invoice_number(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"INV{now_ms}"


def is_allowed_transition(current: str, new: str) -> bool:
    """
    received -> washing -> drying -> ironing -> ready -> completed,
    forward jumps allowed; any non-terminal status -> canceled.
    """
    if current in TERMINAL_STATUSES:
        return False
    if new == "canceled":
        return True
    if current not in STATUS_FLOW or new not in STATUS_FLOW:
        return False
    return STATUS_FLOW.index(new) > STATUS_FLOW.index(current)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from a cashier cart snapshot
      - Validate customer data (unless quick purchase)
      - Record promo usage
      - Reset the cart after success
      - Enforce laundry status transitions
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        promotion_repo: PromotionRepository,
    ):
        self.order_repo = order_repo
        self.promotion_repo = promotion_repo

    # -------- Checkout --------

    def checkout(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        cashier_id: uuid.UUID,
        payload: CheckoutRequest,
    ) -> OrderWithItemsRead:
        """
        Convert a cashier cart into an Order.

        Steps:
          1. Load the cart session; error if empty.
          2. Require customer name + phone unless quick purchase.
          3. Take the pricing snapshot (items, promos, totals).
          4. Create Order, OrderItem and OrderPromotion rows.
          5. Re-check and bump usage_count of the promotions used.
          6. Commit, then clear the cart.
        """
        cart = get_cart_or_404(store, cart_id)
        if not cart.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        if not payload.is_quick_purchase and (
            not payload.customer_name or not payload.customer_phone
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Customer name and phone are required unless quick purchase",
            )

        engine = build_engine(session, self.promotion_repo)
        snapshot = engine.snapshot(cart)
        promotions = self._lock_redeemable_promotions(session, snapshot)

        order = Order(
            invoice=self._unique_invoice(session),
            cashier_id=cashier_id,
            customer_name=None if payload.is_quick_purchase else payload.customer_name,
            customer_phone=None if payload.is_quick_purchase else payload.customer_phone,
            is_quick_purchase=payload.is_quick_purchase,
            payment_method=payload.payment_method,
            payment_status=payload.payment_status,
            status="received",
            notes=payload.notes,
            subtotal=snapshot.subtotal,
            discount=snapshot.discount,
            total_amount=snapshot.total,
        )
        order = self.order_repo.create_order(session, order)

        items = self.order_repo.create_items(session, self._order_items(order.id, snapshot))
        promos = self.order_repo.create_promos(session, self._order_promos(order.id, snapshot))
        for promotion in promotions:
            self.promotion_repo.increment_usage(session, promotion)

        session.commit()
        session.refresh(order)

        engine.clear(cart)
        logger.info(
            "Order %s created from cart %s (total %s)",
            order.invoice,
            cart_id,
            order.total_amount,
        )

        return self._build_order_with_items_dto(order, items, promos)

    # -------- Staff operations --------

    def list_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, skip, limit, status=status_filter)
        return orders  # type: ignore[return-value]

    def get_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_or_404(session, order_id)
        items = self.order_repo.list_items_for_order(session, order.id)
        promos = self.order_repo.list_promos_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items, promos)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Move an order along the laundry workflow.

        Any invalid transition raises 400.
        """
        order = self._get_or_404(session, order_id)

        current = order.status
        new = payload.status

        if current == new:
            return order  # type: ignore[return-value]

        if not is_allowed_transition(current, new):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order  # type: ignore[return-value]

    def update_payment_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: PaymentStatusUpdate,
    ) -> OrderRead:
        """
        Settle an unpaid order. A paid order cannot go back to unpaid.
        """
        order = self._get_or_404(session, order_id)

        if order.payment_status == "paid" and payload.payment_status == "unpaid":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Paid orders cannot be marked unpaid",
            )

        order.payment_status = payload.payment_status
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order  # type: ignore[return-value]

    # -------- Helpers --------

    def _get_or_404(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def _unique_invoice(self, session: Session) -> str:
        now_ms = int(time.time() * 1000)
        invoice = next_invoice_number(now_ms)
        while self.order_repo.get_by_invoice(session, invoice) is not None:
            now_ms += 1
            invoice = next_invoice_number(now_ms)
        return invoice

    @staticmethod
    def _order_items(order_id: uuid.UUID, snapshot: CheckoutSnapshot) -> list[OrderItem]:
        return [
            OrderItem(
                order_id=order_id,
                line_id=it.id,
                position=idx,
                product_id=it.product_id,
                variation_id=it.variation_id,
                kind=it.kind,
                name=it.name,
                sku=it.sku,
                variation_name=it.variation_name,
                unit_price=it.unit_price,
                measure=it.measure,
                subtotal=it.subtotal,
            )
            for idx, it in enumerate(snapshot.items)
        ]

    @staticmethod
    def _order_promos(order_id: uuid.UUID, snapshot: CheckoutSnapshot) -> list[OrderPromotion]:
        return [
            OrderPromotion(
                order_id=order_id,
                promo_id=p.id,
                code=p.code,
                kind=p.kind,
                value=p.value,
                discount_amount=promo_discount(p, snapshot.subtotal),
            )
            for p in snapshot.promos
        ]

    def _lock_redeemable_promotions(
        self,
        session: Session,
        snapshot: CheckoutSnapshot,
    ) -> list[Promotion]:
        """
        Re-check every applied promotion against the database at checkout.

        A promotion deleted, deactivated, expired or used up since it was
        applied fails the checkout with 400; the cart stays as it is.
        """
        today = date.today()
        promotions: list[Promotion] = []
        for promo in snapshot.promos:
            try:
                promotion_id = uuid.UUID(promo.id)
            except ValueError:
                # not from the promotions table
                continue
            promotion = self.promotion_repo.get_for_update(session, promotion_id)
            if promotion is None or not is_redeemable(promotion, today):
                session.rollback()
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Promo {promo.code} is no longer available",
                )
            promotions.append(promotion)
        return promotions

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
        promos: list[OrderPromotion],
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models.
        """
        return OrderWithItemsRead(
            id=order.id,
            invoice=order.invoice,
            cashier_id=order.cashier_id,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            is_quick_purchase=order.is_quick_purchase,
            payment_method=order.payment_method,  # Literal
            payment_status=order.payment_status,  # Literal
            status=order.status,  # Literal
            notes=order.notes,
            subtotal=order.subtotal,
            discount=order.discount,
            total_amount=order.total_amount,
            created_at=order.created_at,
            items=[
                OrderItemRead(
                    id=it.id,
                    line_id=it.line_id,
                    product_id=it.product_id,
                    variation_id=it.variation_id,
                    kind=it.kind,
                    name=it.name,
                    sku=it.sku,
                    variation_name=it.variation_name,
                    unit_price=it.unit_price,
                    measure=it.measure,
                    subtotal=it.subtotal,
                )
                for it in items
            ],
            promos=[
                OrderPromotionRead(
                    promo_id=p.promo_id,
                    code=p.code,
                    kind=p.kind,
                    value=p.value,
                    discount_amount=p.discount_amount,
                )
                for p in promos
            ],
        )
