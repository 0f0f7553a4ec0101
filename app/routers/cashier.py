# app/routers/cashier.py
import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from app.core.auth import require_staff
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartRead, PromoApply
from app.schemas.order import CheckoutRequest, OrderWithItemsRead
from app.services.cart_store import CartSessionStore
from app.services.cashier_service import CashierService
from app.services.order_service import OrderService

router = APIRouter(
    prefix="/cashier",
    tags=["Cashier"],
    dependencies=[Depends(require_staff)],
)

product_repo = ProductRepository()
promotion_repo = PromotionRepository()
order_repo = OrderRepository()
service = CashierService(product_repo, promotion_repo)
order_service = OrderService(order_repo, promotion_repo)


def get_cart_store(request: Request) -> CartSessionStore:
    """
    Cart sessions live on the application (see lifespan in app/main.py).
    """
    return request.app.state.carts


@router.post("/carts", response_model=CartRead, status_code=status.HTTP_201_CREATED)
def open_cart(
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Start a cashier session with an empty cart.
    """
    return service.open_cart(session, store)


@router.get("/carts/{cart_id}", response_model=CartRead)
def get_cart(
    cart_id: uuid.UUID,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Cart contents with subtotal, discount and total.
    """
    return service.get_cart(session, store, cart_id)


@router.delete("/carts/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_cart(
    cart_id: uuid.UUID,
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Close a cashier session without creating an order.
    """
    service.discard_cart(store, cart_id)
    return None


@router.post("/carts/{cart_id}/items", response_model=CartRead)
def add_item(
    cart_id: uuid.UUID,
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Add a product (1 pcs) or service (0.5 kg) to the cart.

    Adding the same product/variation again increases the quantity/weight.
    """
    return service.add_item(session, store, cart_id, payload)


@router.patch("/carts/{cart_id}/items/{item_id}", response_model=CartRead)
def update_item(
    cart_id: uuid.UUID,
    item_id: str,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Set the quantity/weight of a cart line (clamped to 1 pcs / 0.5 kg).
    """
    return service.update_item(session, store, cart_id, item_id, payload)


@router.delete("/carts/{cart_id}/items/{item_id}", response_model=CartRead)
def remove_item(
    cart_id: uuid.UUID,
    item_id: str,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    return service.remove_item(session, store, cart_id, item_id)


@router.post("/carts/{cart_id}/clear", response_model=CartRead)
def clear_cart(
    cart_id: uuid.UUID,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Empty the cart (items and promos), keeping the session open.
    """
    return service.clear_cart(session, store, cart_id)


@router.post("/carts/{cart_id}/promos", response_model=CartRead)
def apply_promo(
    cart_id: uuid.UUID,
    payload: PromoApply,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    """
    Apply a promo code (case-insensitive).

    400 when the code is empty, unknown, already applied or the
    minimum order is not met; the cart is left unchanged.
    """
    return service.apply_promo(session, store, cart_id, payload)


@router.delete("/carts/{cart_id}/promos/{promo_id}", response_model=CartRead)
def remove_promo(
    cart_id: uuid.UUID,
    promo_id: str,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
):
    return service.remove_promo(session, store, cart_id, promo_id)


@router.post(
    "/carts/{cart_id}/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    cart_id: uuid.UUID,
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    store: CartSessionStore = Depends(get_cart_store),
    current_user: User = Depends(require_staff),
):
    """
    Create an order from the cart and reset the cart for the next customer.
    """
    return order_service.checkout(session, store, cart_id, current_user.id, payload)
