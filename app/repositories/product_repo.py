# app/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from app.models.product import Product, ProductVariation


class ProductRepository:
    """
    Data access layer for Product & ProductVariation.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_sku(self, session: Session, sku: str) -> Product | None:
        stmt = select(Product).where(Product.sku == sku)
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        kind: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if kind:
            stmt = stmt.where(Product.kind == kind)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(col(Product.name).ilike(pattern), col(Product.sku).ilike(pattern))
            )
        stmt = stmt.order_by(Product.name).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(
        self,
        session: Session,
        product: Product,
        variations: list[ProductVariation] | None = None,
    ) -> Product:
        """
        Insert a product together with its variations in one commit.
        """
        session.add(product)
        if variations:
            session.flush()  # parent row first
            session.add_all(variations)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        for variation in self.list_variations(session, product.id):
            session.delete(variation)
        session.delete(product)
        session.commit()

    # ----- Variations -----

    def list_variations(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductVariation]:
        stmt = (
            select(ProductVariation)
            .where(ProductVariation.product_id == product_id)
            .order_by(ProductVariation.sort_order)
        )
        return session.exec(stmt).all()

    def get_variation_by_sku(
        self,
        session: Session,
        sku: str,
    ) -> ProductVariation | None:
        stmt = select(ProductVariation).where(ProductVariation.sku == sku)
        return session.exec(stmt).first()

    def replace_variations(
        self,
        session: Session,
        product_id: uuid.UUID,
        variations: list[ProductVariation],
    ) -> list[ProductVariation]:
        """
        Swap the full variation list of a product; committed by the
        caller together with the product row.
        """
        for old in self.list_variations(session, product_id):
            session.delete(old)
        session.flush()
        session.add_all(variations)
        return variations
