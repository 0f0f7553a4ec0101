# tests/test_cashier_api.py
from datetime import date, timedelta

import pytest

from app.repositories.product_repo import ProductRepository
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.product import ProductCreate, VariationInput
from app.schemas.promotion import PromotionCreate, PromotionUpdate
from app.services.product_service import ProductService
from app.services.promotion_service import PromotionService

API = "/api/v1/cashier"


@pytest.fixture
def catalog(session):
    products = ProductService(ProductRepository())
    hanger = products.create_product(
        session,
        ProductCreate(name="Hanger Kawat", kind="product", category="packaging", price=15000),
    )
    laundry = products.create_product(
        session,
        ProductCreate(name="Cuci Kiloan Reguler", kind="service", category="laundry", price=8000),
    )
    detergent = products.create_product(
        session,
        ProductCreate(
            name="Deterjen Cair Premium",
            kind="product",
            category="detergent",
            has_variations=True,
            variations=[
                VariationInput(name="Ukuran 500ml", price=25000),
                VariationInput(name="Ukuran 1L", price=45000),
            ],
        ),
    )
    return {"hanger": hanger, "laundry": laundry, "detergent": detergent}


@pytest.fixture
def promotions(session):
    service = PromotionService(PromotionRepository())
    today = date.today()
    created = {}
    for code, kind, value, min_order in (
        ("POTONGAN5K", "fixed", 5000, 0),
        ("DISKON10", "percentage", 10, 0),
        ("WELCOME20", "percentage", 20, 30000),
    ):
        created[code] = service.create_promotion(
            session,
            PromotionCreate(
                title=f"Promo {code}",
                code=code,
                kind=kind,
                value=value,
                min_order=min_order,
                start_date=today - timedelta(days=1),
                end_date=today + timedelta(days=30),
                status="active",
            ),
        )
    return created


@pytest.fixture
def cart_id(client):
    resp = client.post(f"{API}/carts")
    assert resp.status_code == 201
    return resp.json()["id"]


def _add(client, cart_id, product_id, variation_id=None):
    body = {"product_id": str(product_id)}
    if variation_id:
        body["variation_id"] = str(variation_id)
    return client.post(f"{API}/carts/{cart_id}/items", json=body)


def test_open_cart_is_empty(client):
    resp = client.post(f"{API}/carts")

    data = resp.json()
    assert data["items"] == []
    assert data["promos"] == []
    assert data["totals"] == {"subtotal": 0, "discount": 0, "total": 0}


def test_unknown_cart_session(client):
    resp = client.get(f"{API}/carts/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


def test_end_to_end_pricing(client, cart_id, catalog, promotions):
    hanger, laundry = catalog["hanger"], catalog["laundry"]

    data = _add(client, cart_id, hanger.id).json()
    assert data["totals"]["subtotal"] == 15000

    data = _add(client, cart_id, laundry.id).json()
    assert data["items"][1]["measure"] == 0.5
    assert data["items"][1]["subtotal"] == 4000
    assert data["totals"]["subtotal"] == 19000

    resp = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "potongan5k"})
    assert resp.status_code == 200
    assert resp.json()["totals"] == {"subtotal": 19000, "discount": 5000, "total": 14000}


def test_repeated_add_increments(client, cart_id, catalog):
    for _ in range(3):
        data = _add(client, cart_id, catalog["hanger"].id).json()

    assert len(data["items"]) == 1
    assert data["items"][0]["measure"] == 3
    assert data["items"][0]["subtotal"] == 45000


def test_variation_required_is_noop(client, cart_id, catalog):
    resp = _add(client, cart_id, catalog["detergent"].id)

    assert resp.status_code == 200
    assert resp.json()["items"] == []


def test_add_variation(client, cart_id, catalog):
    detergent = catalog["detergent"]
    large = detergent.variations[1]

    data = _add(client, cart_id, detergent.id, large.id).json()

    item = data["items"][0]
    assert item["id"] == f"{detergent.id}_{large.id}"
    assert item["sku"] == f"{detergent.sku}-V02"
    assert item["unit_price"] == 45000


def test_unknown_product_or_variation(client, cart_id, catalog):
    missing = "11111111-1111-1111-1111-111111111111"

    assert _add(client, cart_id, missing).status_code == 404
    assert _add(client, cart_id, catalog["detergent"].id, missing).status_code == 404


def test_update_clamps_and_remove(client, cart_id, catalog):
    laundry_id = str(catalog["laundry"].id)
    _add(client, cart_id, laundry_id)

    data = client.patch(f"{API}/carts/{cart_id}/items/{laundry_id}", json={"measure": 0.1}).json()
    assert data["items"][0]["measure"] == 0.5

    data = client.patch(f"{API}/carts/{cart_id}/items/{laundry_id}", json={"measure": 4}).json()
    assert data["items"][0]["subtotal"] == 32000

    data = client.delete(f"{API}/carts/{cart_id}/items/missing").json()
    assert len(data["items"]) == 1

    data = client.delete(f"{API}/carts/{cart_id}/items/{laundry_id}").json()
    assert data["items"] == []


@pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity"])
def test_update_rejects_non_finite_measure(client, cart_id, catalog, raw):
    laundry_id = str(catalog["laundry"].id)
    _add(client, cart_id, laundry_id)

    resp = client.patch(
        f"{API}/carts/{cart_id}/items/{laundry_id}",
        content=f'{{"measure": {raw}}}',
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 422
    data = client.get(f"{API}/carts/{cart_id}").json()
    assert data["items"][0]["measure"] == 0.5


def test_promo_errors(client, cart_id, catalog, promotions):
    _add(client, cart_id, catalog["hanger"].id)

    ok = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "DISKON10"})
    dup = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "diskon10"})
    bad = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "NOPE"})
    short = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "WELCOME20"})
    empty = client.post(f"{API}/carts/{cart_id}/promos", json={"code": ""})

    assert ok.status_code == 200
    assert (dup.status_code, dup.json()["detail"]) == (400, "promo already applied")
    assert (bad.status_code, bad.json()["detail"]) == (400, "invalid promo code")
    assert short.status_code == 400
    assert short.json()["detail"] == "minimum order of Rp 30.000 required"
    assert empty.status_code == 400

    data = client.get(f"{API}/carts/{cart_id}").json()
    assert [p["code"] for p in data["promos"]] == ["DISKON10"]


def test_remove_promo(client, cart_id, catalog, promotions):
    _add(client, cart_id, catalog["hanger"].id)
    data = client.post(f"{API}/carts/{cart_id}/promos", json={"code": "DISKON10"}).json()
    promo_id = data["promos"][0]["id"]

    data = client.delete(f"{API}/carts/{cart_id}/promos/unknown").json()
    assert len(data["promos"]) == 1

    data = client.delete(f"{API}/carts/{cart_id}/promos/{promo_id}").json()
    assert data["promos"] == []
    assert data["totals"]["total"] == 15000


def test_clear_and_discard(client, cart_id, catalog, promotions):
    _add(client, cart_id, catalog["hanger"].id)
    client.post(f"{API}/carts/{cart_id}/promos", json={"code": "DISKON10"})

    data = client.post(f"{API}/carts/{cart_id}/clear").json()
    assert data["items"] == [] and data["promos"] == []

    assert client.delete(f"{API}/carts/{cart_id}").status_code == 204
    assert client.get(f"{API}/carts/{cart_id}").status_code == 404
    assert client.delete(f"{API}/carts/{cart_id}").status_code == 404


# ---- checkout ----


def test_checkout_creates_order_and_resets_cart(client, cart_id, catalog, promotions, cashier, session):
    _add(client, cart_id, catalog["hanger"].id)
    _add(client, cart_id, catalog["laundry"].id)
    client.post(f"{API}/carts/{cart_id}/promos", json={"code": "POTONGAN5K"})

    resp = client.post(
        f"{API}/carts/{cart_id}/checkout",
        json={
            "customer_name": "Budi",
            "customer_phone": "08123456789",
            "payment_method": "qris",
            "payment_status": "paid",
        },
    )

    assert resp.status_code == 201
    order = resp.json()
    assert order["invoice"].startswith("INV")
    assert order["cashier_id"] == str(cashier.id)
    assert order["status"] == "received"
    assert (order["subtotal"], order["discount"], order["total_amount"]) == (19000, 5000, 14000)
    assert [it["kind"] for it in order["items"]] == ["product", "service"]
    assert order["promos"][0]["code"] == "POTONGAN5K"
    assert order["promos"][0]["discount_amount"] == 5000

    session.refresh(promotions["POTONGAN5K"])
    assert promotions["POTONGAN5K"].usage_count == 1

    data = client.get(f"{API}/carts/{cart_id}").json()
    assert data["items"] == [] and data["promos"] == []


def test_checkout_empty_cart(client, cart_id):
    resp = client.post(f"{API}/carts/{cart_id}/checkout", json={"is_quick_purchase": True})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cart is empty"


def test_checkout_requires_customer_unless_quick(client, cart_id, catalog):
    _add(client, cart_id, catalog["hanger"].id)

    resp = client.post(f"{API}/carts/{cart_id}/checkout", json={"customer_name": "Budi"})
    assert resp.status_code == 400
    assert len(client.get(f"{API}/carts/{cart_id}").json()["items"]) == 1

    resp = client.post(f"{API}/carts/{cart_id}/checkout", json={"is_quick_purchase": True})
    assert resp.status_code == 201
    assert resp.json()["customer_name"] is None
    assert resp.json()["is_quick_purchase"] is True


def test_invoice_numbers_are_unique(client, catalog):
    invoices = set()
    for _ in range(3):
        cart = client.post(f"{API}/carts").json()["id"]
        _add(client, cart, catalog["hanger"].id)
        resp = client.post(f"{API}/carts/{cart}/checkout", json={"is_quick_purchase": True})
        invoices.add(resp.json()["invoice"])

    assert len(invoices) == 3


def _single_use_promotion(session, code="ONCE"):
    today = date.today()
    return PromotionService(PromotionRepository()).create_promotion(
        session,
        PromotionCreate(
            title="Promo sekali pakai",
            code=code,
            kind="fixed",
            value=1000,
            start_date=today,
            end_date=today + timedelta(days=7),
            status="active",
            max_usage=1,
        ),
    )


def test_single_use_promo_cannot_be_redeemed_twice(client, catalog, session):
    promotion = _single_use_promotion(session)
    carts = []
    for _ in range(2):
        cart = client.post(f"{API}/carts").json()["id"]
        _add(client, cart, catalog["hanger"].id)
        assert client.post(f"{API}/carts/{cart}/promos", json={"code": "ONCE"}).status_code == 200
        carts.append(cart)

    first = client.post(f"{API}/carts/{carts[0]}/checkout", json={"is_quick_purchase": True})
    second = client.post(f"{API}/carts/{carts[1]}/checkout", json={"is_quick_purchase": True})

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["detail"] == "Promo ONCE is no longer available"

    session.refresh(promotion)
    assert promotion.usage_count == 1

    data = client.get(f"{API}/carts/{carts[1]}").json()
    assert len(data["items"]) == 1
    assert [p["code"] for p in data["promos"]] == ["ONCE"]


def test_checkout_rejects_promo_deactivated_after_apply(client, cart_id, catalog, promotions, session):
    _add(client, cart_id, catalog["hanger"].id)
    client.post(f"{API}/carts/{cart_id}/promos", json={"code": "DISKON10"})

    PromotionService(PromotionRepository()).update_promotion(
        session, promotions["DISKON10"].id, PromotionUpdate(status="draft")
    )
    resp = client.post(f"{API}/carts/{cart_id}/checkout", json={"is_quick_purchase": True})

    assert resp.status_code == 400
    assert client.get("/api/v1/orders").json() == []
    assert len(client.get(f"{API}/carts/{cart_id}").json()["promos"]) == 1
