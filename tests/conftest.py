# tests/conftest.py
import os
import uuid

# Settings are read on first import of app.*; point them at a throwaway DB.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from app.core.auth import require_admin, require_staff
from app.database import engine, get_session
from app.main import app
from app.models.user import User



@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


def _make_user(session: Session, role: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{role}-{uuid.uuid4().hex[:6]}@laundry.test",
        name=role,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def cashier(session):
    return _make_user(session, "cashier")


@pytest.fixture
def admin(session):
    return _make_user(session, "admin")


@pytest.fixture
def raw_client(session):
    """Client without auth overrides."""
    app.dependency_overrides.clear()
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(session, cashier, admin):
    """
    Client acting as staff; admin-only routes act as `admin`.
    """
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[require_staff] = lambda: cashier
    app.dependency_overrides[require_admin] = lambda: admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
