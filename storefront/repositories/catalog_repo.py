# storefront/repositories/catalog_repo.py
import uuid

from sqlmodel import Session, select

from storefront.core.config import get_settings
from storefront.core.records import decode_record, decode_records
from storefront.core.supabase_client import catalog_client
from storefront.models.catalog import Category, Product, ProductImage
from storefront.schemas.catalog import (
    CategoryRead,
    ProductFilter,
    ProductImageRead,
    ProductRead,
)


class CatalogRepository:
    """
    Read-only access to the catalog tables through SQLModel.

    - Pure DB operations, no writes.
    - The order core never mutates catalog data.
    """

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_products(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.id.in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def list_products(
        self,
        session: Session,
        filters: ProductFilter,
    ) -> list[Product]:
        stmt = select(Product)
        if filters.category_id is not None:
            stmt = stmt.where(Product.category_id == filters.category_id)
        if filters.search:
            stmt = stmt.where(Product.name.ilike(f"%{filters.search}%"))
        stmt = (
            stmt.order_by(Product.created_at.desc())
            .offset(filters.skip)
            .limit(filters.limit)
        )
        return session.exec(stmt).all()

    def list_categories(self, session: Session) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        return session.exec(stmt).all()

    def get_category(
        self,
        session: Session,
        category_id: uuid.UUID,
    ) -> Category | None:
        return session.get(Category, category_id)

    def list_images_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        stmt = select(ProductImage).where(ProductImage.product_id == product_id)
        return session.exec(stmt).all()


class SupabaseCatalogRepository:
    """
    Same surface as CatalogRepository, reading through Supabase PostgREST.

    PostgREST returns plain dicts; every row goes through decode_record so
    callers only ever see validated read models. The `session` argument is
    accepted for interface parity and ignored.
    """

    def __init__(self, client):
        self.client = client

    def get_product(self, session: Session | None, product_id: uuid.UUID) -> ProductRead | None:
        res = (
            self.client.table("products")
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if not res.data:
            return None
        return decode_record(ProductRead, res.data[0])

    def get_products(
        self,
        session: Session | None,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, ProductRead]:
        if not product_ids:
            return {}
        res = (
            self.client.table("products")
            .select("*")
            .in_("id", [str(pid) for pid in product_ids])
            .execute()
        )
        products = decode_records(ProductRead, res.data or [])
        return {p.id: p for p in products}

    def list_products(
        self,
        session: Session | None,
        filters: ProductFilter,
    ) -> list[ProductRead]:
        query = self.client.table("products").select("*")
        if filters.category_id is not None:
            query = query.eq("category_id", str(filters.category_id))
        if filters.search:
            query = query.ilike("name", f"%{filters.search}%")
        res = (
            query.order("created_at", desc=True)
            .range(filters.skip, filters.skip + filters.limit - 1)
            .execute()
        )
        return decode_records(ProductRead, res.data or [])

    def list_categories(self, session: Session | None) -> list[CategoryRead]:
        res = self.client.table("categories").select("*").order("name").execute()
        return decode_records(CategoryRead, res.data or [])

    def get_category(
        self,
        session: Session | None,
        category_id: uuid.UUID,
    ) -> CategoryRead | None:
        res = (
            self.client.table("categories")
            .select("*")
            .eq("id", str(category_id))
            .limit(1)
            .execute()
        )
        if not res.data:
            return None
        return decode_record(CategoryRead, res.data[0])

    def list_images_for_product(
        self,
        session: Session | None,
        product_id: uuid.UUID,
    ) -> list[ProductImageRead]:
        res = (
            self.client.table("product_images")
            .select("*")
            .eq("product_id", str(product_id))
            .execute()
        )
        return decode_records(ProductImageRead, res.data or [])


def get_catalog_repository():
    """
    Pick the catalog backend configured by CATALOG_BACKEND.
    """
    if get_settings().CATALOG_BACKEND == "supabase":
        return SupabaseCatalogRepository(catalog_client())
    return CatalogRepository()
