# app/services/product_service.py
import random
import re
import uuid
from typing import NoReturn

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.models.product import Product, ProductVariation
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductRead,
    ProductUpdate,
    VariationInput,
    VariationRead,
)

SKU_PREFIX: dict[str, str] = {"product": "PRD", "service": "SRV"}


def generate_sku(kind: str, name: str, rng: random.Random | None = None) -> str:
    """
    PRD-/SRV- + first three alphanumerics of the name + 4 random digits,
    e.g. "Cuci Kering" (service) => "SRV-CUC0427".
    """
    rng = rng or random
    name_part = re.sub(r"[^A-Z0-9]", "", name.upper())[:3]
    return f"{SKU_PREFIX[kind]}-{name_part}{rng.randint(0, 9999):04d}"


def variation_sku(product_sku: str, index: int) -> str:
    """
    Zero-based index => <sku>-V01, <sku>-V02, ...
    """
    return f"{product_sku}-V{index + 1:02d}"


class ProductService:
    """
    Business logic for the catalog (products, services, variations).

    Responsibilities:
      - SKU generation & uniqueness across products and variations
      - variation rules (has_variations => at least one variation)
      - admin-only operations (enforced at router via require_admin)
    """

    MAX_SKU_ATTEMPTS = 20

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    def _sku_taken(
        self,
        session: Session,
        sku: str,
        ignore_product_id: uuid.UUID | None = None,
    ) -> bool:
        product = self.repo.get_by_sku(session, sku)
        if product is not None and product.id != ignore_product_id:
            return True
        variation = self.repo.get_variation_by_sku(session, sku)
        if variation is not None and variation.product_id != ignore_product_id:
            return True
        return False

    def _ensure_sku(
        self,
        session: Session,
        kind: str,
        name: str,
        requested: str | None,
        ignore_product_id: uuid.UUID | None = None,
    ) -> str:
        if requested:
            if self._sku_taken(session, requested, ignore_product_id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"SKU {requested} is already in use",
                )
            return requested

        for _ in range(self.MAX_SKU_ATTEMPTS):
            sku = generate_sku(kind, name)
            if not self._sku_taken(session, sku):
                return sku
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not generate a unique SKU, please provide one",
        )

    def _build_variations(
        self,
        session: Session,
        product: Product,
        inputs: list[VariationInput],
        product_sku: str | None = None,
    ) -> list[ProductVariation]:
        product_sku = product_sku or product.sku
        variations: list[ProductVariation] = []
        seen: set[str] = set()
        for idx, v in enumerate(inputs):
            sku = v.sku or variation_sku(product_sku, idx)
            if sku in seen or sku == product_sku or self._sku_taken(session, sku, product.id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"SKU {sku} is already in use",
                )
            seen.add(sku)
            variations.append(
                ProductVariation(
                    product_id=product.id,
                    name=v.name,
                    sku=sku,
                    price=v.price,
                    stock=v.stock,
                    sort_order=idx,
                )
            )
        return variations

    @staticmethod
    def _sku_conflict(session: Session) -> NoReturn:
        # unique index caught a SKU taken after our checks ran
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="SKU is already in use",
        )

    @staticmethod
    def _check_variation_rules(has_variations: bool, variations: list) -> None:
        if has_variations and not variations:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Products with variations need at least one variation",
            )

    def to_read(self, session: Session, product: Product) -> ProductRead:
        variations = self.repo.list_variations(session, product.id)
        return ProductRead(
            id=product.id,
            name=product.name,
            sku=product.sku,
            kind=product.kind,
            category=product.category,
            price=product.price,
            stock=product.stock,
            description=product.description,
            has_variations=product.has_variations,
            is_active=product.is_active,
            created_at=product.created_at,
            variations=[
                VariationRead(
                    id=v.id,
                    name=v.name,
                    sku=v.sku,
                    price=v.price,
                    stock=v.stock,
                    sort_order=v.sort_order,
                )
                for v in variations
            ],
        )

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        kind: str | None = None,
        search: str | None = None,
    ) -> list[ProductRead]:
        products = self.repo.list_products(
            session,
            skip=skip,
            limit=limit,
            only_active=only_active,
            kind=kind,
            search=search,
        )
        return [self.to_read(session, p) for p in products]

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> ProductRead:
        """
        Create a product/service with a unique SKU and its variations.
        """
        self._check_variation_rules(payload.has_variations, payload.variations)

        sku = self._ensure_sku(session, payload.kind, payload.name, payload.sku)
        product = Product(
            name=payload.name,
            sku=sku,
            kind=payload.kind,
            category=payload.category,
            price=payload.price,
            stock=payload.stock,
            description=payload.description,
            has_variations=payload.has_variations,
            is_active=payload.is_active,
        )

        variations = []
        if payload.has_variations:
            variations = self._build_variations(session, product, payload.variations)

        try:
            product = self.repo.create(session, product, variations)
        except IntegrityError:
            self._sku_conflict(session)

        return self.to_read(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update of a product.

        - SKU changes are checked for uniqueness.
        - `variations` replaces the whole list when provided.
        """
        product = self.get_product(session, product_id)

        # validate everything before touching the row
        sku = product.sku
        if payload.sku is not None and payload.sku != product.sku:
            sku = self._ensure_sku(
                session, product.kind, product.name, payload.sku, product.id
            )

        has_variations = (
            payload.has_variations
            if payload.has_variations is not None
            else product.has_variations
        )

        new_variations: list[ProductVariation] | None = None
        if payload.variations is not None:
            inputs = payload.variations if has_variations else []
            self._check_variation_rules(has_variations, inputs)
            new_variations = self._build_variations(session, product, inputs, sku)
        else:
            self._check_variation_rules(
                has_variations, self.repo.list_variations(session, product.id)
            )
            if not has_variations:
                new_variations = []

        product.sku = sku
        product.has_variations = has_variations
        for field in ("name", "category", "price", "stock", "description", "is_active"):
            value = getattr(payload, field)
            if value is not None:
                setattr(product, field, value)

        try:
            if new_variations is not None:
                self.repo.replace_variations(session, product.id, new_variations)
            product = self.repo.update(session, product)
        except IntegrityError:
            self._sku_conflict(session)
        return self.to_read(session, product)

    def delete_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)
