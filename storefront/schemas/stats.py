# storefront/schemas/stats.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


class StatusCount(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: str
    count: int


class LatestOrderSummary(SQLModel):
    """
    One row of the dashboard's "recent orders" table.
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    user_id: uuid.UUID
    customer_name: str
    grand_total: int
    status: str
    created_at: datetime


class AdminDashboardStats(SQLModel):
    """
    Dashboard payload. Money is in whole taka.
    """

    model_config = ConfigDict(extra="forbid")

    total_products: int
    total_customers: int
    total_orders: int
    total_revenue: int
    orders_by_status: list[StatusCount]
    latest_orders: list[LatestOrderSummary]
