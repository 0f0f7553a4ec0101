# tests/test_auth.py
import os
import uuid

from jose import jwt
from sqlmodel import select

from app.models.user import User

TEST_SECRET = os.environ["JWT_SECRET"]

CARTS = "/api/v1/cashier/carts"
PROMOTIONS = "/api/v1/promotions"


def _token(sub: uuid.UUID | str, email: str | None = "kasir@laundry.test") -> dict:
    claims = {"sub": str(sub)}
    if email:
        claims["email"] = email
    token = jwt.encode(claims, TEST_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_is_401(raw_client):
    assert raw_client.post(CARTS).status_code == 401


def test_bad_signature_is_401(raw_client):
    token = jwt.encode({"sub": str(uuid.uuid4()), "email": "x@y.z"}, "wrong", algorithm="HS256")
    resp = raw_client.post(CARTS, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_token_without_email_is_401(raw_client):
    assert raw_client.post(CARTS, headers=_token(uuid.uuid4(), email=None)).status_code == 401


def test_unknown_user_is_provisioned_as_cashier(raw_client, session):
    sub = uuid.uuid4()

    resp = raw_client.post(CARTS, headers=_token(sub))

    assert resp.status_code == 201
    user = session.exec(select(User).where(User.id == sub)).one()
    assert user.role == "cashier"
    assert user.name == "kasir"

    assert raw_client.get(PROMOTIONS, headers=_token(sub)).status_code == 403


def test_admin_can_manage_promotions(raw_client, admin):
    resp = raw_client.get(PROMOTIONS, headers=_token(admin.id, admin.email))
    assert resp.status_code == 200
    assert resp.json() == []
