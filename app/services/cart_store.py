# app/services/cart_store.py
import logging
import time
import uuid
from typing import Callable

from app.schemas.cart import Cart

logger = logging.getLogger(__name__)


class CartSessionStore:
    """
    In-memory carts for open cashier sessions, keyed by session id.

    One instance lives on `app.state.carts`; each cart is only touched by
    the cashier who opened it. Sessions idle for longer than `ttl_seconds`
    are dropped whenever a new one is opened.
    """

    def __init__(
        self,
        ttl_seconds: float = 12 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._carts: dict[uuid.UUID, Cart] = {}
        self._touched: dict[uuid.UUID, float] = {}

    def open(self) -> tuple[uuid.UUID, Cart]:
        self.prune()
        cart_id = uuid.uuid4()
        cart = Cart()
        self._carts[cart_id] = cart
        self._touched[cart_id] = self._clock()
        return cart_id, cart

    def get(self, cart_id: uuid.UUID) -> Cart | None:
        cart = self._carts.get(cart_id)
        if cart is not None:
            self._touched[cart_id] = self._clock()
        return cart

    def discard(self, cart_id: uuid.UUID) -> bool:
        self._touched.pop(cart_id, None)
        return self._carts.pop(cart_id, None) is not None

    def prune(self) -> int:
        """
        Drop sessions idle past the TTL; returns how many were dropped.
        """
        cutoff = self._clock() - self.ttl_seconds
        stale = [cid for cid, touched in self._touched.items() if touched < cutoff]
        for cart_id in stale:
            self.discard(cart_id)
        if stale:
            logger.info("Dropped %d idle cashier carts", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._carts)
