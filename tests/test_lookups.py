# tests/test_lookups.py
from datetime import date, timedelta

from app.models.product import Product, ProductVariation
from app.models.promotion import Promotion
from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.services.lookups import (
    ProductCatalog,
    PromotionDirectory,
    StaticPromoDirectory,
)

TODAY = date(2025, 1, 10)


def _promotion(session, code, **overrides):
    fields = dict(
        title=f"Promo {code}",
        code=code,
        kind="percentage",
        value=25,
        min_order=50000,
        max_discount=100000,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        status="active",
    )
    fields.update(overrides)
    promotion = Promotion(**fields)
    session.add(promotion)
    session.commit()
    session.refresh(promotion)
    return promotion


def test_static_directory_defaults():
    directory = StaticPromoDirectory()

    assert directory.find("diskon10").value == 10
    assert directory.find("POTONGAN10K").kind == "fixed"
    assert directory.find("UNKNOWN") is None


def test_promotion_directory_finds_active_promotion(session):
    promotion = _promotion(session, "NEWYEAR25")
    directory = PromotionDirectory(session, PromotionRepository(), today=lambda: TODAY)

    promo = directory.find("newyear25")

    assert promo.id == str(promotion.id)
    assert promo.code == "NEWYEAR25"
    assert promo.min_order == 50000
    assert promo.max_discount == 100000


def test_promotion_directory_hides_unredeemable(session):
    _promotion(session, "DRAFT15", status="draft")
    _promotion(session, "MERDEKA45", end_date=TODAY - timedelta(days=1))
    _promotion(session, "FLAT10K", start_date=TODAY + timedelta(days=5))
    _promotion(session, "LIMITED", max_usage=100, usage_count=100)
    directory = PromotionDirectory(session, PromotionRepository(), today=lambda: TODAY)

    for code in ("DRAFT15", "MERDEKA45", "FLAT10K", "LIMITED", "MISSING"):
        assert directory.find(code) is None


def test_product_catalog_returns_variations_in_order(session):
    product = Product(
        name="Parfum Laundry",
        sku="PRD-PFM005",
        kind="product",
        category="perfume",
        has_variations=True,
    )
    session.add(product)
    session.add(ProductVariation(product_id=product.id, name="Aroma Vanilla", sku="PRD-PFM005-V03", price=20000, sort_order=2))
    session.add(ProductVariation(product_id=product.id, name="Aroma Lavender", sku="PRD-PFM005-V01", price=18000, sort_order=0))
    session.commit()

    entry = ProductCatalog(session, ProductRepository()).get(str(product.id))

    assert entry.kind == "product"
    assert entry.has_variations is True
    assert [v.name for v in entry.variations] == ["Aroma Lavender", "Aroma Vanilla"]
    assert entry.find_variation(entry.variations[1].id).unit_price == 20000


def test_product_catalog_hides_inactive_and_unknown(session):
    product = Product(
        name="Cuci Karpet",
        sku="SRV-CKP009",
        kind="service",
        category="laundry",
        price=35000,
        is_active=False,
    )
    session.add(product)
    session.commit()
    catalog = ProductCatalog(session, ProductRepository())

    assert catalog.get(str(product.id)) is None
    assert catalog.get("not-a-uuid") is None
