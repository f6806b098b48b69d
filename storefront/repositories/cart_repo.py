# storefront/repositories/cart_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.cart import CartItem


class CartRepository:

    # Get lines for a user, oldest first
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def list_for_product(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> list[CartItem]:
        """
        All lines for (user, product). Normally zero or one; more only if
        an older client inserted duplicates.
        """
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, item_id: uuid.UUID) -> CartItem | None:
        return session.get(CartItem, item_id)

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def delete_many(self, session: Session, items: list[CartItem]) -> None:
        for item in items:
            session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        self.delete_for_user(session, user_id)
        session.commit()

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        """
        Delete all lines without committing, so checkout can include it in the
        same transaction as the order and payment inserts.
        """
        rows = self.list_for_user(session, user_id)
        for row in rows:
            session.delete(row)
        session.flush()
        return len(rows)
