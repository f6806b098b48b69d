# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, created exactly once per checkout.

    Money fields are integers in the smallest BDT unit and are frozen at
    creation. `status` is the only column an admin may change afterwards.
    """

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "checkout_token", name="uq_orders_user_checkout_token"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    # cod_pending | payment_pending | processing | shipped | delivered | cancelled
    status: str = Field(
        default="cod_pending",
        index=True,
        description="Fulfillment status",
    )

    # cod (cash on delivery) is the only method wired up
    payment_method: str = Field(
        default="cod",
        description="Payment method identifier",
    )

    subtotal: int = Field(description="Sum of unit price x quantity")
    delivery_charge: int = Field(description="Flat charge of the delivery zone")
    total_price: int = Field(description="Same as subtotal; kept for schema parity")
    grand_total: int = Field(description="subtotal + delivery_charge")

    customer_name: str
    customer_phone: str
    customer_address: str

    # inside_dhaka | outside_dhaka
    delivery_zone: str = Field(
        description="Delivery zone identifier",
    )

    checkout_token: str | None = Field(
        default=None,
        index=True,
        max_length=64,
        description="Client idempotency key for checkout retries",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )


class Payment(SQLModel, table=True):
    """
    Payment record, one per order, created in the same transaction.
    """

    __tablename__ = "payments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        unique=True,
        index=True,
    )

    amount: int = Field(description="Equals the order's grand_total")

    # pending (cod collected on delivery)
    status: str = Field(default="pending")

    payment_method: str = Field(default="cod")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
