# app/services/lookups.py
"""
Read-only lookups used by the pricing engine.

The engine only depends on the two protocols below. Implementations:
  - StaticPromoDirectory: fixed in-memory table of promo codes
  - PromotionDirectory: promotions table (active + in date window)
  - ProductCatalog: products table with variations
"""
import uuid
from datetime import date
from typing import Callable, Iterable, Mapping, Protocol

from sqlmodel import Session

from app.models.product import Product, ProductVariation
from app.models.promotion import Promotion
from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.cart import CatalogEntry, CatalogVariation, PromoCode


class PromoLookup(Protocol):
    def find(self, code: str) -> PromoCode | None: ...


class CatalogLookup(Protocol):
    def get(self, product_id: str) -> CatalogEntry | None: ...


# Codes accepted by the cashier cart before promotions moved to the database.
DEFAULT_PROMOS: tuple[PromoCode, ...] = (
    PromoCode(id="1", code="DISKON10", kind="percentage", value=10),
    PromoCode(id="2", code="DISKON20", kind="percentage", value=20),
    PromoCode(id="3", code="POTONGAN10K", kind="fixed", value=10000),
)


class StaticPromoDirectory:
    """
    Promo lookup over a fixed set of codes.
    """

    def __init__(self, promos: Iterable[PromoCode] = DEFAULT_PROMOS):
        self._by_code: Mapping[str, PromoCode] = {p.code: p for p in promos}

    def find(self, code: str) -> PromoCode | None:
        return self._by_code.get(code.strip().upper())


def promo_from_promotion(promotion: Promotion) -> PromoCode:
    return PromoCode(
        id=str(promotion.id),
        code=promotion.code,
        kind=promotion.kind,
        value=promotion.value,
        min_order=promotion.min_order,
        max_discount=promotion.max_discount,
    )


def is_redeemable(promotion: Promotion, today: date) -> bool:
    """
    A promotion can be applied when it is active, today falls inside
    [start_date, end_date] and its usage limit is not reached.
    """
    if promotion.status != "active":
        return False
    if not (promotion.start_date <= today <= promotion.end_date):
        return False
    if promotion.max_usage is not None and promotion.usage_count >= promotion.max_usage:
        return False
    return True


class PromotionDirectory:
    """
    Promo lookup backed by the promotions table.
    """

    def __init__(
        self,
        session: Session,
        repo: PromotionRepository,
        today: Callable[[], date] = date.today,
    ):
        self.session = session
        self.repo = repo
        self.today = today

    def find(self, code: str) -> PromoCode | None:
        promotion = self.repo.get_by_code(self.session, code.strip().upper())
        if promotion is None or not is_redeemable(promotion, self.today()):
            return None
        return promo_from_promotion(promotion)


def catalog_entry_from_product(
    product: Product,
    variations: list[ProductVariation],
) -> CatalogEntry:
    return CatalogEntry(
        id=str(product.id),
        kind=product.kind,
        name=product.name,
        sku=product.sku,
        unit_price=product.price,
        has_variations=product.has_variations,
        variations=[
            CatalogVariation(
                id=str(v.id),
                name=v.name,
                sku=v.sku,
                unit_price=v.price,
            )
            for v in variations
        ],
    )


class ProductCatalog:
    """
    Catalog lookup backed by the products table. Inactive products are hidden.
    """

    def __init__(self, session: Session, repo: ProductRepository):
        self.session = session
        self.repo = repo

    def get(self, product_id: str) -> CatalogEntry | None:
        try:
            pid = uuid.UUID(str(product_id))
        except ValueError:
            return None

        product = self.repo.get_by_id(self.session, pid)
        if product is None or not product.is_active:
            return None

        variations = self.repo.list_variations(self.session, product.id)
        return catalog_entry_from_product(product, variations)
