# app/seed.py
"""
Demo catalog and promotions for a fresh database.

Runs on startup when SEED_DEMO_DATA=true. Existing SKUs / codes are left
untouched, so seeding twice is harmless.
"""
import logging
from datetime import date, timedelta

from sqlmodel import Session

from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.product import ProductCreate, VariationInput
from app.schemas.promotion import PromotionCreate
from app.services.product_service import ProductService
from app.services.promotion_service import PromotionService

logger = logging.getLogger(__name__)

# (sku, name, kind, category, price, variations[(name, price)])
DEMO_PRODUCTS: list[tuple[str, str, str, str, float, list[tuple[str, float]]]] = [
    ("SRV-CKR001", "Cuci Kiloan Reguler", "service", "laundry", 3000, []),
    ("SRV-CKE002", "Cuci Kiloan Express", "service", "laundry", 5000, []),
    ("SRV-STR003", "Setrika Saja", "service", "laundry", 2000, []),
    (
        "PRD-DCP004",
        "Deterjen Cair Premium",
        "product",
        "detergent",
        0,
        [("Ukuran 500ml", 25000), ("Ukuran 1L", 45000), ("Ukuran 2L", 80000)],
    ),
    (
        "PRD-PFM005",
        "Parfum Laundry",
        "product",
        "perfume",
        0,
        [("Aroma Lavender", 18000), ("Aroma Lemon", 18000), ("Aroma Vanilla", 20000)],
    ),
    ("PRD-PKG006", "Kantong Plastik Laundry", "product", "packaging", 5000, []),
    ("SRV-SPT007", "Cuci Sepatu", "service", "laundry", 25000, []),
    ("PRD-HGR008", "Hanger Kawat", "product", "packaging", 1500, []),
]

# (code, title, kind, value, min_order, max_discount)
DEMO_PROMOTIONS: list[tuple[str, str, str, float, float, float | None]] = [
    ("DISKON10", "Diskon 10%", "percentage", 10, 0, None),
    ("DISKON20", "Diskon 20%", "percentage", 20, 0, None),
    ("POTONGAN10K", "Potongan Rp 10.000", "fixed", 10000, 0, None),
    ("WELCOME20", "Promo Pelanggan Baru", "percentage", 20, 30000, None),
    ("WEEKEND30", "Diskon Akhir Pekan", "percentage", 30, 60000, 150000),
]


def seed_demo_data(session: Session) -> None:
    product_repo = ProductRepository()
    promotion_repo = PromotionRepository()
    products = ProductService(product_repo)
    promotions = PromotionService(promotion_repo)

    created_products = 0
    for sku, name, kind, category, price, variations in DEMO_PRODUCTS:
        if product_repo.get_by_sku(session, sku) is not None:
            continue
        products.create_product(
            session,
            ProductCreate(
                name=name,
                sku=sku,
                kind=kind,
                category=category,
                price=price,
                has_variations=bool(variations),
                variations=[VariationInput(name=n, price=p) for n, p in variations],
            ),
        )
        created_products += 1

    today = date.today()
    created_promotions = 0
    for code, title, kind, value, min_order, max_discount in DEMO_PROMOTIONS:
        if promotion_repo.get_by_code(session, code) is not None:
            continue
        promotions.create_promotion(
            session,
            PromotionCreate(
                title=title,
                code=code,
                kind=kind,
                value=value,
                min_order=min_order,
                max_discount=max_discount,
                start_date=today,
                end_date=today + timedelta(days=365),
                status="active",
            ),
        )
        created_promotions += 1

    logger.info(
        "Demo data seeded: %d products, %d promotions",
        created_products,
        created_promotions,
    )
