# app/schemas/promotion.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

PromotionKind = Literal["percentage", "fixed"]
PromotionStatus = Literal["active", "scheduled", "expired", "draft"]


class PromotionBase(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=3, max_length=100)
    code: str = Field(min_length=3, max_length=30)
    description: str | None = None
    kind: PromotionKind
    value: float = Field(ge=0)
    min_order: float = Field(default=0, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    start_date: date
    end_date: date
    status: PromotionStatus = "draft"
    max_usage: int | None = Field(default=None, ge=1)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v.isalnum():
            raise ValueError("code may only contain letters and digits")
        return v


class PromotionCreate(PromotionBase):
    """
    Payload for creating a promotion.
    """

    @model_validator(mode="after")
    def check_consistency(self) -> "PromotionCreate":
        if self.kind == "percentage" and self.value > 100:
            raise ValueError("percentage value must be between 0 and 100")
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class PromotionUpdate(SQLModel):
    """
    Partial update payload; cross-field checks run in the service
    against the merged result.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=3, max_length=100)
    code: str | None = Field(default=None, min_length=3, max_length=30)
    description: str | None = None
    kind: PromotionKind | None = None
    value: float | None = Field(default=None, ge=0)
    min_order: float | None = Field(default=None, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    status: PromotionStatus | None = None
    max_usage: int | None = Field(default=None, ge=1)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().upper()
        if not v.isalnum():
            raise ValueError("code may only contain letters and digits")
        return v


class PromotionRead(SQLModel):
    id: uuid.UUID
    title: str
    code: str
    description: str | None
    kind: PromotionKind
    value: float
    min_order: float
    max_discount: float | None
    start_date: date
    end_date: date
    status: PromotionStatus
    usage_count: int
    max_usage: int | None
    created_at: datetime
