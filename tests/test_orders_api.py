# tests/test_orders_api.py
import pytest

from app.models.order import Order
from app.services.order_service import is_allowed_transition, next_invoice_number

API = "/api/v1/orders"


@pytest.fixture
def order(session, cashier):
    order = Order(
        invoice=next_invoice_number(1735689600000),
        cashier_id=cashier.id,
        customer_name="Siti",
        customer_phone="0812000111",
        payment_method="cash",
        payment_status="unpaid",
        subtotal=40000,
        discount=4000,
        total_amount=36000,
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def test_invoice_format():
    assert next_invoice_number(1735689600000) == "INV1735689600000"


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        ("received", "washing", True),
        ("received", "ready", True),
        ("drying", "ironing", True),
        ("ready", "completed", True),
        ("washing", "received", False),
        ("ready", "washing", False),
        ("ironing", "canceled", True),
        ("completed", "canceled", False),
        ("canceled", "received", False),
    ],
)
def test_status_transitions(current, new, allowed):
    assert is_allowed_transition(current, new) is allowed


def test_list_and_get_order(client, order):
    listed = client.get(API).json()
    assert [o["invoice"] for o in listed] == ["INV1735689600000"]

    detail = client.get(f"{API}/{order.id}").json()
    assert detail["total_amount"] == 36000
    assert detail["items"] == []
    assert detail["promos"] == []


def test_list_filters_by_status(client, order):
    assert client.get(API, params={"status": "washing"}).json() == []
    assert len(client.get(API, params={"status": "received"}).json()) == 1


def test_get_missing_order(client):
    resp = client.get(f"{API}/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


def test_update_status(client, order):
    resp = client.patch(f"{API}/{order.id}/status", json={"status": "washing"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "washing"

    resp = client.patch(f"{API}/{order.id}/status", json={"status": "received"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid status transition: washing -> received"


def test_update_payment_status(client, order):
    resp = client.patch(f"{API}/{order.id}/payment", json={"payment_status": "paid"})
    assert resp.json()["payment_status"] == "paid"

    resp = client.patch(f"{API}/{order.id}/payment", json={"payment_status": "unpaid"})
    assert resp.status_code == 400
