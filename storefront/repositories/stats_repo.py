# storefront/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.catalog import Product
from storefront.models.order import Order
from storefront.models.profile import Profile


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_products(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_customers(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Profile).where(Profile.role == "customer")
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_revenue(self, session: Session) -> int:
        """
        Sum of grand_total for all non-cancelled orders.
        """
        stmt = (
            select(func.coalesce(func.sum(Order.grand_total), 0))
            .where(Order.status != "cancelled")
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def orders_by_status(self, session: Session) -> list[tuple]:
        stmt = (
            select(Order.status, func.count(Order.id))
            .group_by(Order.status)
            .order_by(Order.status)
        )
        return list(session.exec(stmt).all())

    def latest_orders(
        self,
        session: Session,
        limit: int = 5,
    ) -> list[Order]:
        """
        Latest N orders by created_at (any status).
        """
        stmt = (
            select(Order)
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())
