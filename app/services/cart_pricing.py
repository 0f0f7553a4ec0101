# app/services/cart_pricing.py
import logging
import math

from app.core.formatting import format_rupiah
from app.schemas.cart import (
    Cart,
    CartTotals,
    CatalogEntry,
    CatalogVariation,
    CheckoutSnapshot,
    LineItem,
    PromoCode,
    PromoOutcome,
)
from app.services.lookups import PromoLookup

logger = logging.getLogger(__name__)

# Lowest allowed measure and default increment per item kind:
#   product => quantity, service => kg
MIN_MEASURE: dict[str, float] = {"product": 1, "service": 0.5}
MEASURE_STEP: dict[str, float] = {"product": 1, "service": 0.5}

PROMO_REQUIRED = "promo code required"
PROMO_ALREADY_APPLIED = "promo already applied"
PROMO_INVALID = "invalid promo code"


def line_id(product_id: str, variation_id: str | None = None) -> str:
    """
    Cart row key: the same product with different variations gets
    different rows.
    """
    if variation_id:
        return f"{product_id}_{variation_id}"
    return product_id


def clamp_measure(kind: str, measure: float) -> float:
    if not math.isfinite(measure):
        return MIN_MEASURE[kind]
    if kind == "product":
        # quantities are whole units
        measure = math.floor(measure)
    return max(MIN_MEASURE[kind], measure)


def promo_discount(promo: PromoCode, subtotal: float) -> float:
    """
    Discount contributed by one promo, always against the original subtotal.
    """
    if promo.kind == "percentage":
        amount = subtotal * promo.value / 100
        if promo.max_discount is not None:
            amount = min(amount, promo.max_discount)
        return amount
    return promo.value


class CartPricingEngine:
    """
    Pure operations over a Cart: line items, promo codes and totals.

    - No I/O; the only collaborator is the injected PromoLookup.
    - Every operation mutates the given cart in place and returns it.
    - Missing ids are silent no-ops; promo failures come back as
      PromoOutcome values, never exceptions.
    """

    def __init__(self, promo_lookup: PromoLookup):
        self.promo_lookup = promo_lookup

    # ---- line items ----

    def add_item(
        self,
        cart: Cart,
        entry: CatalogEntry,
        variation: CatalogVariation | None = None,
    ) -> Cart:
        """
        Add one step of a catalog entry (1 item or 0.5 kg).

        Entries with variations are ignored until a variation is chosen.
        """
        if entry.has_variations and variation is None:
            logger.debug("add_item skipped: %s requires a variation", entry.id)
            return cart

        item_id = line_id(entry.id, variation.id if variation else None)
        existing = self._find_item(cart, item_id)

        if existing is not None:
            self._set_measure(existing, existing.measure + MEASURE_STEP[existing.kind])
            return cart

        unit_price = variation.unit_price if variation else entry.unit_price
        measure = MIN_MEASURE[entry.kind]
        cart.items.append(
            LineItem(
                id=item_id,
                kind=entry.kind,
                product_id=entry.id,
                variation_id=variation.id if variation else None,
                name=entry.name,
                sku=variation.sku if variation else entry.sku,
                variation_name=variation.name if variation else None,
                unit_price=unit_price,
                measure=measure,
                subtotal=unit_price * measure,
            )
        )
        return cart

    def update_item(self, cart: Cart, item_id: str, measure: float) -> Cart:
        item = self._find_item(cart, item_id)
        if item is not None:
            self._set_measure(item, measure)
        return cart

    def remove_item(self, cart: Cart, item_id: str) -> Cart:
        cart.items = [it for it in cart.items if it.id != item_id]
        return cart

    # ---- promos ----

    def apply_promo(self, cart: Cart, code: str) -> PromoOutcome:
        """
        Resolve `code` through the promo lookup and append it to the cart.

        Failure messages:
          - empty code
          - code already applied (case-insensitive)
          - unknown code
          - subtotal below the promo's min_order
        """
        normalized = (code or "").strip().upper()
        if not normalized:
            return PromoOutcome(ok=False, message=PROMO_REQUIRED)

        if any(p.code == normalized for p in cart.promos):
            return PromoOutcome(ok=False, message=PROMO_ALREADY_APPLIED)

        promo = self.promo_lookup.find(normalized)
        if promo is None:
            return PromoOutcome(ok=False, message=PROMO_INVALID)

        subtotal = self.get_totals(cart).subtotal
        if subtotal < promo.min_order:
            return PromoOutcome(
                ok=False,
                message=f"minimum order of {format_rupiah(promo.min_order)} required",
            )

        cart.promos.append(promo)
        return PromoOutcome(ok=True, message=f"promo {promo.code} applied", promo=promo)

    def remove_promo(self, cart: Cart, promo_id: str) -> Cart:
        cart.promos = [p for p in cart.promos if p.id != promo_id]
        return cart

    # ---- totals ----

    def get_totals(self, cart: Cart) -> CartTotals:
        subtotal = sum(it.subtotal for it in cart.items)
        discount = sum(promo_discount(p, subtotal) for p in cart.promos)
        return CartTotals(
            subtotal=subtotal,
            discount=discount,
            total=max(0, subtotal - discount),
        )

    def snapshot(self, cart: Cart) -> CheckoutSnapshot:
        """
        Order submission payload; copies so later cart edits don't leak in.
        """
        totals = self.get_totals(cart)
        return CheckoutSnapshot(
            items=[it.model_copy() for it in cart.items],
            promos=[p.model_copy() for p in cart.promos],
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
        )

    def clear(self, cart: Cart) -> Cart:
        cart.items = []
        cart.promos = []
        return cart

    # ---- internal helpers ----

    @staticmethod
    def _find_item(cart: Cart, item_id: str) -> LineItem | None:
        for it in cart.items:
            if it.id == item_id:
                return it
        return None

    @staticmethod
    def _set_measure(item: LineItem, measure: float) -> None:
        item.measure = clamp_measure(item.kind, measure)
        item.subtotal = item.unit_price * item.measure
