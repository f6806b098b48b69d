# storefront/services/pricing.py
"""
Pricing calculator.

Pure functions of (cart lines, zone). Nothing here touches the database,
so checkout can recompute totals from the authoritative cart instead of
trusting whatever the client last displayed.

BDT is a zero-decimal currency here: every amount is a whole taka.
"""
from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_UP

from storefront.core.errors import InvalidZone
from storefront.schemas.checkout import DeliveryZone, PricingSnapshot

# Smallest currency unit (1 taka)
MINOR_UNIT = Decimal("1")

DELIVERY_ZONES: dict[str, DeliveryZone] = {
    "inside_dhaka": DeliveryZone(id="inside_dhaka", name="Inside Dhaka", charge=60),
    "outside_dhaka": DeliveryZone(id="outside_dhaka", name="Outside Dhaka", charge=120),
}


def list_zones() -> list[DeliveryZone]:
    return list(DELIVERY_ZONES.values())


def get_zone(zone_id: str | None) -> DeliveryZone:
    """
    Resolve a zone id. Unknown ids are rejected, never defaulted.
    """
    zone = DELIVERY_ZONES.get(zone_id) if zone_id else None
    if zone is None:
        raise InvalidZone(
            f"Unknown delivery zone: {zone_id!r}",
            delivery_zone=zone_id,
            allowed=sorted(DELIVERY_ZONES),
        )
    return zone


def to_minor_units(value: Decimal | float | int) -> int:
    """
    Round an amount to the smallest currency unit (half-up).

    Floats go through str() first so 0.1-style noise doesn't leak in.
    """
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return int(amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP))


def line_total(unit_price: float | int | Decimal, quantity: int) -> int:
    return to_minor_units(Decimal(str(unit_price)) * quantity)


def compute_subtotal(lines: Iterable[tuple[float | int | Decimal, int]]) -> int:
    """
    Σ unit_price × quantity, summed exactly and rounded once at the end.
    """
    total = sum(
        (Decimal(str(price)) * qty for price, qty in lines),
        Decimal("0"),
    )
    return to_minor_units(total)


def compute_pricing(
    lines: Iterable[tuple[float | int | Decimal, int]],
    zone: DeliveryZone,
) -> PricingSnapshot:
    """
    Build a PricingSnapshot from (unit_price, quantity) pairs and a zone.
    """
    subtotal = compute_subtotal(lines)
    return PricingSnapshot(
        subtotal=subtotal,
        delivery_charge=zone.charge,
        grand_total=subtotal + zone.charge,
        delivery_zone=zone.id,
    )
