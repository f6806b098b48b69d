# storefront/routers/checkout.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import CurrentPrincipal, require_customer
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.catalog_repo import get_catalog_repository
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.checkout import CheckoutRequest, DeliveryZone
from storefront.schemas.order import OrderDetail
from storefront.services import pricing
from storefront.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["Checkout"])

service = CheckoutService(
    OrderRepository(),
    CartRepository(),
    get_catalog_repository(),
)


@router.get("/zones", response_model=list[DeliveryZone])
def list_delivery_zones():
    """
    The fixed delivery zones and their flat charges.
    """
    return pricing.list_zones()


@router.post(
    "",
    response_model=OrderDetail,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Place a cash-on-delivery order from the current user's cart.

    Totals are recomputed server-side. On success the cart is empty and
    the order comes back with its pending payment.

    Send the same `checkout_token` when retrying after a network error;
    the original order is returned instead of a duplicate.
    """
    return service.checkout(session, principal.user_id, payload)
