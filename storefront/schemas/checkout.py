# storefront/schemas/checkout.py
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PaymentMethod = Literal["cod"]


class DeliveryZone(SQLModel):
    """
    Fixed shipping-cost tier. Not persisted; orders keep a charge snapshot.
    """

    id: str
    name: str
    charge: int


class PricingSnapshot(SQLModel):
    """
    Totals derived from cart + zone at one moment.

    grand_total == subtotal + delivery_charge, always.
    """

    subtotal: int
    delivery_charge: int
    grand_total: int
    delivery_zone: str


class CheckoutRequest(SQLModel):
    """
    Payload for placing an order from the current cart.

    User provides:
      - customer_name, customer_address, customer_phone (required)
      - delivery_zone (must be a known zone id)
      - checkout_token (optional idempotency key for retries)

    Backend derives:
      - user_id from token
      - status = 'cod_pending'
      - subtotal / delivery_charge / grand_total from the live cart

    Shipping fields are optional here so the service can report every
    missing one at once instead of failing on the first.
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str | None = None
    customer_address: str | None = None
    customer_phone: str | None = None
    delivery_zone: str | None = None
    payment_method: PaymentMethod = "cod"
    checkout_token: str | None = Field(default=None, max_length=64)

    @field_validator(
        "customer_name",
        "customer_address",
        "customer_phone",
        "delivery_zone",
        "checkout_token",
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None
