# storefront/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

OrderStatus = Literal[
    "cod_pending",
    "payment_pending",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
]


class PaymentRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    amount: int
    status: str
    payment_method: str
    created_at: datetime


class OrderRead(SQLModel):
    """
    Order as the owning customer sees it.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    status: OrderStatus
    payment_method: str
    subtotal: int
    delivery_charge: int
    total_price: int
    grand_total: int
    customer_name: str
    customer_phone: str
    customer_address: str
    delivery_zone: str
    created_at: datetime


class OrderDetail(OrderRead):
    """
    Order with its payment record. `payment` is None only for orders
    written outside checkout that still await reconciliation.
    """

    payment: PaymentRead | None = None


class AdminOrderRow(OrderRead):
    """
    Denormalized admin row: order fields plus the customer's account email.
    """

    model_config = ConfigDict(extra="ignore")

    customer_email: str | None = None


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
