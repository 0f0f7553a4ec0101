# app/routers/promotions.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.promotion_repo import PromotionRepository
from app.schemas.promotion import (
    PromotionCreate,
    PromotionRead,
    PromotionStatus,
    PromotionUpdate,
)
from app.services.promotion_service import PromotionService

router = APIRouter(
    prefix="/promotions",
    tags=["Promotions"],
    dependencies=[Depends(require_admin)],
)

repo = PromotionRepository()
service = PromotionService(repo)


@router.get("", response_model=list[PromotionRead])
def list_promotions(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    status: PromotionStatus | None = None,
):
    return service.list_promotions(session, skip=skip, limit=limit, status_filter=status)


@router.get("/{promotion_id}", response_model=PromotionRead)
def get_promotion(
    promotion_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_promotion(session, promotion_id)


@router.post("", response_model=PromotionRead, status_code=status.HTTP_201_CREATED)
def create_promotion(
    payload: PromotionCreate,
    session: Session = Depends(get_session),
):
    """
    Create a promotion. Codes are stored uppercase and must be unique.
    """
    return service.create_promotion(session, payload)


@router.patch("/{promotion_id}", response_model=PromotionRead)
def update_promotion(
    promotion_id: uuid.UUID,
    payload: PromotionUpdate,
    session: Session = Depends(get_session),
):
    return service.update_promotion(session, promotion_id, payload)


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_promotion(
    promotion_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_promotion(session, promotion_id)
    return None
