# storefront/services/cart_service.py
import logging
import uuid

from sqlmodel import Session

from storefront.core.errors import NotFound, OutOfStock, ValidationError
from storefront.models.cart import CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartLineRead,
    CartView,
)
from storefront.schemas.checkout import PricingSnapshot
from storefront.services import pricing

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - one line per (user, product); repeat adds increment it
      - validate product existence and (advisory) stock
      - reject quantities below 1
      - join lines with live catalog data for display

    Cart writes are last-write-wins per row. Two tabs racing on the same
    line can lose an increment; there is no cross-tab lock.
    """

    def __init__(self, cart_repo: CartRepository, catalog_repo):
        self.cart_repo = cart_repo
        self.catalog_repo = catalog_repo

    # ---- internal helpers ----

    def _get_product(self, session: Session, product_id: uuid.UUID):
        product = self.catalog_repo.get_product(session, product_id)
        if not product:
            raise NotFound("Product not found", product_id=str(product_id))
        return product

    def _get_own_line(
        self,
        session: Session,
        user_id: uuid.UUID,
        line_id: uuid.UUID,
    ) -> CartItem:
        item = self.cart_repo.get_by_id(session, line_id)
        # Someone else's line is reported exactly like a missing one.
        if not item or item.user_id != user_id:
            raise NotFound("Item not in cart", line_id=str(line_id))
        return item

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity < 1:
            raise ValidationError(
                "Quantity must be at least 1",
                fields=["quantity"],
            )

    # ---- public operations ----

    def list_items(self, session: Session, user_id: uuid.UUID) -> CartView:
        """
        Return the cart joined with live product name/price/image.

        Lines whose product has been removed from the catalog are dropped
        here, so every remaining line points at an existing product.
        """
        items = self.cart_repo.list_for_user(session, user_id)
        products = self.catalog_repo.get_products(
            session, list({it.product_id for it in items})
        )

        lines: list[CartLineRead] = []
        orphans: list[CartItem] = []
        for it in items:
            product = products.get(it.product_id)
            if product is None:
                orphans.append(it)
                continue
            lines.append(
                CartLineRead(
                    id=it.id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    product_name=product.name,
                    unit_price=product.price,
                    image_url=product.image_url,
                    stock=product.stock,
                    line_total=pricing.line_total(product.price, it.quantity),
                    created_at=it.created_at,
                )
            )

        if orphans:
            logger.warning(
                "Pruning %d cart line(s) for user %s: product no longer exists",
                len(orphans),
                user_id,
            )
            self.cart_repo.delete_many(session, orphans)

        return CartView(
            items=lines,
            total_quantity=sum(line.quantity for line in lines),
            subtotal=pricing.compute_subtotal(
                (line.unit_price, line.quantity) for line in lines
            ),
        )

    def quote(
        self,
        session: Session,
        user_id: uuid.UUID,
        zone_id: str | None,
    ) -> PricingSnapshot:
        """
        Advisory totals for the live cart and a zone. Checkout recomputes.
        """
        zone = pricing.get_zone(zone_id)
        view = self.list_items(session, user_id)
        return pricing.compute_pricing(
            ((line.unit_price, line.quantity) for line in view.items),
            zone,
        )

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartView:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist
          - stock must be > 0 right now (advisory, nothing is reserved)
          - an existing line for the product is incremented, not duplicated
        """
        self._check_quantity(payload.quantity)
        product = self._get_product(session, payload.product_id)

        if product.stock <= 0:
            raise OutOfStock(product_id=str(product.id))

        existing = self.cart_repo.list_for_product(session, user_id, product.id)

        if existing:
            keep, *duplicates = existing
            keep.quantity += payload.quantity + sum(d.quantity for d in duplicates)
            if duplicates:
                logger.warning(
                    "Merging %d duplicate cart line(s) for user %s product %s",
                    len(duplicates),
                    user_id,
                    product.id,
                )
                for dup in duplicates:
                    session.delete(dup)
            self.cart_repo.update(session, keep)
        else:
            self.cart_repo.create(
                session,
                CartItem(
                    user_id=user_id,
                    product_id=product.id,
                    quantity=payload.quantity,
                ),
            )

        return self.list_items(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        line_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartView:
        """
        Set the quantity of one of the caller's lines.

        Quantity is never driven to zero here; removal is a separate call.
        """
        item = self._get_own_line(session, user_id, line_id)
        self._check_quantity(payload.quantity)

        item.quantity = payload.quantity
        self.cart_repo.update(session, item)

        return self.list_items(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        line_id: uuid.UUID,
    ) -> CartView:
        """
        Remove a line. Removing a line that is already gone is not an error.
        """
        item = self.cart_repo.get_by_id(session, line_id)
        if item and item.user_id == user_id:
            self.cart_repo.delete(session, item)

        return self.list_items(session, user_id)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartView:
        """
        Clear all items from the cart and return an empty view.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartView(items=[], total_quantity=0, subtotal=0)
