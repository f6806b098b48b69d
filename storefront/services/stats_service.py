# storefront/services/stats_service.py
from sqlmodel import Session

from storefront.core.errors import ValidationError
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.stats import (
    AdminDashboardStats,
    LatestOrderSummary,
    StatusCount,
)


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(
        self,
        session: Session,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        if not 1 <= latest_n_orders <= 50:
            raise ValidationError(
                "latest must be between 1 and 50",
                fields=["latest"],
            )

        by_status = [
            StatusCount(status=status, count=int(count or 0))
            for status, count in self.repo.orders_by_status(session)
        ]

        latest_orders: list[LatestOrderSummary] = []
        for o in self.repo.latest_orders(session, limit=latest_n_orders):
            latest_orders.append(
                LatestOrderSummary(
                    id=o.id,
                    created_at=o.created_at,
                    user_id=o.user_id,
                    customer_name=o.customer_name,
                    grand_total=o.grand_total,
                    status=o.status,
                )
            )

        return AdminDashboardStats(
            total_products=self.repo.count_products(session),
            total_customers=self.repo.count_customers(session),
            total_orders=self.repo.count_orders(session),
            total_revenue=self.repo.total_revenue(session),
            orders_by_status=by_status,
            latest_orders=latest_orders,
        )
