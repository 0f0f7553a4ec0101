# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin, require_staff
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductKind,
    ProductRead,
    ProductUpdate,
)
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Staff endpoints --------


@router.get(
    "",
    response_model=list[ProductRead],
    dependencies=[Depends(require_staff)],
)
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    only_active: bool = True,
    kind: ProductKind | None = None,
    search: str | None = None,
):
    """
    List the catalog for the cashier screen.

    - `kind` filters products vs services.
    - `search` matches name or SKU (case-insensitive).
    """
    return service.list_products(
        session,
        skip=skip,
        limit=limit,
        only_active=only_active,
        kind=kind,
        search=search,
    )


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_staff)],
)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    product = service.get_product(session, product_id)
    return service.to_read(session, product)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a product or service (admin only).

    SKUs left empty are generated: PRD-/SRV- + name + digits,
    variations get <sku>-V01, <sku>-V02, ...
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product and its variations (admin only).
    """
    service.delete_product(session, product_id)
    return None
