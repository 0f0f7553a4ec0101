# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_staff
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.order import (
    OrderRead,
    OrderStatus,
    OrderWithItemsRead,
    OrderStatusUpdate,
    PaymentStatusUpdate,
)
from app.services.order_service import OrderService

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(require_staff)],
)

order_repo = OrderRepository()
promotion_repo = PromotionRepository()
service = OrderService(order_repo, promotion_repo)


@router.get("", response_model=list[OrderRead])
def list_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    status: OrderStatus | None = None,
):
    """
    List orders, newest first (without items).
    """
    return service.list_orders(session, skip, limit, status_filter=status)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get an order with its items and applied promos.
    """
    return service.get_order(session, order_id)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Move an order along the laundry workflow.

      received -> washing -> drying -> ironing -> ready -> completed

      (forward jumps allowed, any open order -> canceled)
    """
    return service.update_status(session, order_id, payload)


@router.patch("/{order_id}/payment", response_model=OrderRead)
def update_payment_status(
    order_id: uuid.UUID,
    payload: PaymentStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Mark an unpaid order as paid.
    """
    return service.update_payment_status(session, order_id, payload)
