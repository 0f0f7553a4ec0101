# app/services/promotion_service.py
import uuid
from datetime import date

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.promotion import Promotion
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.promotion import PromotionCreate, PromotionUpdate

# Fields an update may explicitly reset to null
NULLABLE_FIELDS = {"description", "max_discount", "max_usage"}


class PromotionService:
    """
    Business logic for promotions.

    Responsibilities:
      - unique, uppercase codes
      - percentage values within 0-100
      - date window consistency
    """

    def __init__(self, repo: PromotionRepository):
        self.repo = repo

    def _ensure_unique_code(
        self,
        session: Session,
        code: str,
        ignore_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.repo.get_by_code(session, code)
        if existing is not None and existing.id != ignore_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Promo code {code} already exists",
            )

    @staticmethod
    def _validate(kind: str, value: float, start_date: date, end_date: date) -> None:
        if kind == "percentage" and value > 100:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Percentage value must be between 0 and 100",
            )
        if end_date < start_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="End date cannot be before start date",
            )

    def list_promotions(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[Promotion]:
        return self.repo.list_promotions(session, skip=skip, limit=limit, status=status_filter)

    def get_promotion(self, session: Session, promotion_id: uuid.UUID) -> Promotion:
        promotion = self.repo.get_by_id(session, promotion_id)
        if not promotion:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Promotion not found",
            )
        return promotion

    def create_promotion(self, session: Session, payload: PromotionCreate) -> Promotion:
        self._ensure_unique_code(session, payload.code)
        self._validate(payload.kind, payload.value, payload.start_date, payload.end_date)
        promotion = Promotion(**payload.model_dump())
        return self.repo.create(session, promotion)

    def update_promotion(
        self,
        session: Session,
        promotion_id: uuid.UUID,
        payload: PromotionUpdate,
    ) -> Promotion:
        """
        Partial update; code uniqueness and cross-field rules are checked
        on the merged promotion.
        """
        promotion = self.get_promotion(session, promotion_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }

        if "code" in changes and changes["code"] != promotion.code:
            self._ensure_unique_code(session, changes["code"], promotion.id)

        merged = {**promotion.model_dump(), **changes}
        self._validate(
            merged["kind"], merged["value"], merged["start_date"], merged["end_date"]
        )

        for field, value in changes.items():
            setattr(promotion, field, value)

        return self.repo.update(session, promotion)

    def delete_promotion(self, session: Session, promotion_id: uuid.UUID) -> None:
        promotion = self.get_promotion(session, promotion_id)
        self.repo.delete(session, promotion)
