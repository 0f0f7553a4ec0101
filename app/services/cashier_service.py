# app/services/cashier_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.cart import (
    Cart,
    CartItemAdd,
    CartItemUpdate,
    CartRead,
    PromoApply,
)
from app.services.cart_pricing import CartPricingEngine
from app.services.cart_store import CartSessionStore
from app.services.lookups import ProductCatalog, PromotionDirectory

logger = logging.getLogger(__name__)


def build_engine(session: Session, promotion_repo: PromotionRepository) -> CartPricingEngine:
    """
    Pricing engine wired to the promotions table for this request.
    """
    return CartPricingEngine(PromotionDirectory(session, promotion_repo))


def get_cart_or_404(store: CartSessionStore, cart_id: uuid.UUID) -> Cart:
    cart = store.get(cart_id)
    if cart is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cart session not found",
        )
    return cart


class CashierService:
    """
    Cashier screen operations over in-memory cart sessions.

    Responsibilities:
      - open / discard cart sessions
      - resolve catalog entries and variations (404 when unknown)
      - run the pricing engine and return the cart with totals
      - turn failed promo outcomes into 400 responses
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        promotion_repo: PromotionRepository,
    ):
        self.product_repo = product_repo
        self.promotion_repo = promotion_repo

    # ---- internal helpers ----

    def _read(
        self,
        engine: CartPricingEngine,
        cart_id: uuid.UUID,
        cart: Cart,
    ) -> CartRead:
        return CartRead(
            id=cart_id,
            items=cart.items,
            promos=cart.promos,
            totals=engine.get_totals(cart),
        )

    # ---- sessions ----

    def open_cart(self, session: Session, store: CartSessionStore) -> CartRead:
        cart_id, cart = store.open()
        logger.info("Cashier cart %s opened", cart_id)
        return self._read(build_engine(session, self.promotion_repo), cart_id, cart)

    def get_cart(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
    ) -> CartRead:
        cart = get_cart_or_404(store, cart_id)
        return self._read(build_engine(session, self.promotion_repo), cart_id, cart)

    def discard_cart(self, store: CartSessionStore, cart_id: uuid.UUID) -> None:
        if not store.discard(cart_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart session not found",
            )
        logger.info("Cashier cart %s discarded", cart_id)

    # ---- line items ----

    def add_item(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        payload: CartItemAdd,
    ) -> CartRead:
        """
        Add one step (1 item / 0.5 kg) of a catalog entry.

        Rules:
          - product must exist and be active (404 otherwise)
          - variation_id, when given, must belong to the product
          - products with variations and no variation_id leave the cart as is
        """
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)

        entry = ProductCatalog(session, self.product_repo).get(str(payload.product_id))
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        variation = None
        if payload.variation_id is not None:
            variation = entry.find_variation(str(payload.variation_id))
            if variation is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Variation not found for this product",
                )

        engine.add_item(cart, entry, variation)
        return self._read(engine, cart_id, cart)

    def update_item(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        item_id: str,
        payload: CartItemUpdate,
    ) -> CartRead:
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)
        engine.update_item(cart, item_id, payload.measure)
        return self._read(engine, cart_id, cart)

    def remove_item(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        item_id: str,
    ) -> CartRead:
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)
        engine.remove_item(cart, item_id)
        return self._read(engine, cart_id, cart)

    def clear_cart(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
    ) -> CartRead:
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)
        engine.clear(cart)
        return self._read(engine, cart_id, cart)

    # ---- promos ----

    def apply_promo(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        payload: PromoApply,
    ) -> CartRead:
        """
        Apply a promo code; any failed outcome => 400 with its message.
        """
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)

        outcome = engine.apply_promo(cart, payload.code)
        if not outcome.ok:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=outcome.message,
            )

        logger.info("Promo %s applied to cart %s", outcome.promo.code, cart_id)
        return self._read(engine, cart_id, cart)

    def remove_promo(
        self,
        session: Session,
        store: CartSessionStore,
        cart_id: uuid.UUID,
        promo_id: str,
    ) -> CartRead:
        cart = get_cart_or_404(store, cart_id)
        engine = build_engine(session, self.promotion_repo)
        engine.remove_promo(cart, promo_id)
        return self._read(engine, cart_id, cart)
