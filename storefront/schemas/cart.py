# storefront/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart. Quantity defaults to one unit.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for updating the quantity of a cart line.

    Values below 1 are rejected by the service; removal is DELETE.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartLineRead(SQLModel):
    """
    A cart line joined with the live catalog entry.

    `unit_price` is today's list price; it is advisory until checkout.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product_name: str
    unit_price: float
    image_url: str | None = None
    stock: int
    line_total: int
    created_at: datetime


class CartView(SQLModel):
    """
    Full cart response with advisory totals.
    """

    items: list[CartLineRead]
    total_quantity: int
    subtotal: int
