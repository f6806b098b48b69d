# storefront/services/catalog_service.py
import uuid

from sqlmodel import Session

from storefront.core.errors import NotFound
from storefront.schemas.catalog import (
    CategoryRead,
    ProductDetail,
    ProductFilter,
    ProductImageRead,
    ProductRead,
)


class CatalogService:
    """
    Read-only catalog queries for the storefront.

    Product/category CRUD and image upload belong to the admin console's
    own backend; nothing here writes.
    """

    def __init__(self, repo):
        self.repo = repo

    def list_products(self, session: Session, filters: ProductFilter) -> list[ProductRead]:
        products = self.repo.list_products(session, filters)
        return [ProductRead.model_validate(p, from_attributes=True) for p in products]

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductDetail:
        """
        Product with its category and gallery images.

        Raises:
            NotFound(404): if the product does not exist.
        """
        product = self.repo.get_product(session, product_id)
        if not product:
            raise NotFound("Product not found", product_id=str(product_id))

        category = None
        if product.category_id is not None:
            category = self.repo.get_category(session, product.category_id)

        images = self.repo.list_images_for_product(session, product.id)

        return ProductDetail(
            **ProductRead.model_validate(product, from_attributes=True).model_dump(),
            category=(
                CategoryRead.model_validate(category, from_attributes=True)
                if category is not None
                else None
            ),
            images=[
                ProductImageRead.model_validate(img, from_attributes=True)
                for img in images
            ],
        )

    def list_categories(self, session: Session) -> list[CategoryRead]:
        return [
            CategoryRead.model_validate(c, from_attributes=True)
            for c in self.repo.list_categories(session)
        ]
