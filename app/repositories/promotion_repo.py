# app/repositories/promotion_repo.py
import uuid

from sqlmodel import Session, select

from app.models.promotion import Promotion


class PromotionRepository:
    """
    Data access layer for promotions.
    """

    def get_by_id(self, session: Session, promotion_id: uuid.UUID) -> Promotion | None:
        return session.get(Promotion, promotion_id)

    def get_for_update(self, session: Session, promotion_id: uuid.UUID) -> Promotion | None:
        """
        Fresh row, locked until commit (no-op lock on SQLite).
        """
        stmt = (
            select(Promotion)
            .where(Promotion.id == promotion_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    def get_by_code(self, session: Session, code: str) -> Promotion | None:
        stmt = select(Promotion).where(Promotion.code == code)
        return session.exec(stmt).first()

    def list_promotions(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[Promotion]:
        stmt = select(Promotion)
        if status:
            stmt = stmt.where(Promotion.status == status)
        stmt = stmt.order_by(Promotion.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, promotion: Promotion) -> Promotion:
        session.add(promotion)
        session.commit()
        session.refresh(promotion)
        return promotion

    def update(self, session: Session, promotion: Promotion) -> Promotion:
        session.add(promotion)
        session.commit()
        session.refresh(promotion)
        return promotion

    def delete(self, session: Session, promotion: Promotion) -> None:
        session.delete(promotion)
        session.commit()

    def increment_usage(self, session: Session, promotion: Promotion) -> Promotion:
        """
        Bump usage_count without committing; part of the checkout transaction.
        """
        promotion.usage_count += 1
        session.add(promotion)
        session.flush()
        return promotion
