# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    One line of a customer's cart: a product and how many of it.

    Price and name are not stored here; they are read live from the
    catalog every time the cart is shown and frozen only at checkout.
    At most one line per (user_id, product_id). No unique index backs
    this, so CartService merges duplicates when it finds them.
    """

    __tablename__ = "cart_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)

    # No FK: catalog rows can be deleted by the admin console while a
    # line still points at them.
    product_id: uuid.UUID = Field(index=True)

    quantity: int = Field(default=1, description="Units, always >= 1")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the product was first added (UTC)",
    )
