# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Staff profile mirrored from the auth provider.

    Identity:
      - id: MUST match the JWT "sub" claim

    Role:
      - "cashier" | "admin"

    Passwords live with the auth provider; this table only keeps
    identity, display name and application role.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the JWT sub claim",
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    name: str = Field(
        max_length=50,
        description="Staff display name; first part of email by default",
    )

    role: str = Field(
        default="cashier",
        index=True,
        description="Application role: cashier | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
