# storefront/routers/admin_stats.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.stats import AdminDashboardStats
from storefront.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin/stats",
    tags=["Admin Stats"],
    dependencies=[Depends(require_admin)],
)

service = StatsService(StatsRepository())


@router.get("", response_model=AdminDashboardStats)
def dashboard(
    latest: int = 5,
    session: Session = Depends(get_session),
):
    """
    Counters for the admin dashboard plus the most recent orders.

    `latest` (1-50) sets how many recent orders come back. Cancelled
    orders are counted per status but left out of revenue.
    """
    return service.get_admin_dashboard_stats(session, latest_n_orders=latest)
