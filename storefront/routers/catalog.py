# storefront/routers/catalog.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.catalog_repo import get_catalog_repository
from storefront.schemas.catalog import (
    CategoryRead,
    ProductDetail,
    ProductFilter,
    ProductRead,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

service = CatalogService(get_catalog_repository())


@router.get("/products", response_model=list[ProductRead])
def list_products(
    category_id: uuid.UUID | None = None,
    search: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    session: Session = Depends(get_session),
):
    """
    Public product listing, newest first.

    Query params (optional):
      - category_id
      - search: case-insensitive match on name
      - skip / limit
    """
    filters = ProductFilter(
        category_id=category_id,
        search=search,
        skip=skip,
        limit=limit,
    )
    return service.list_products(session, filters)


@router.get("/products/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Public product detail with category and gallery images.
    """
    return service.get_product(session, product_id)


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    All categories, sorted by name.
    """
    return service.list_categories(session)
