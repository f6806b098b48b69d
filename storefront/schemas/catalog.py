# storefront/schemas/catalog.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CategoryRead(SQLModel):
    """
    Category as returned to clients and decoded from PostgREST rows.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    name: str
    created_at: datetime | None = None


class ProductRead(SQLModel):
    """
    Product read model.

    Also the strict shape PostgREST catalog rows are decoded into;
    unknown columns (joins, new fields) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    name: str
    description: str | None = None
    price: float = Field(ge=0)
    stock: int
    category_id: uuid.UUID | None = None
    image_url: str | None = None
    created_at: datetime | None = None


class ProductImageRead(SQLModel):
    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    product_id: uuid.UUID
    image_url: str


class ProductDetail(ProductRead):
    """
    Product with its category and gallery.
    """

    category: CategoryRead | None = None
    images: list[ProductImageRead] = []


class ProductFilter(SQLModel):
    """
    Query parameters for product listings.
    """

    category_id: uuid.UUID | None = None
    search: str | None = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=50, ge=1, le=200)
