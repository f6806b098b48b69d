# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import CurrentPrincipal, require_customer
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.catalog_repo import get_catalog_repository
from storefront.schemas.cart import CartView, CartItemCreate, CartItemUpdate
from storefront.schemas.checkout import PricingSnapshot
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
service = CartService(cart_repo, get_catalog_repository())


@router.get("", response_model=CartView)
def get_my_cart(
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Get current user's cart with live product prices.

    Auth:
      - Only role='customer' can access.
      - Anonymous callers get 401 with a redirect hint to /login.
    """
    return service.list_items(session, principal.user_id)


@router.get("/quote", response_model=PricingSnapshot)
def quote_cart(
    zone: str,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Advisory subtotal / delivery charge / grand total for a zone.

    The order is re-priced at checkout regardless of what this returned.
    """
    return service.quote(session, principal.user_id, zone)


@router.post("", response_model=CartView)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    return service.add_item(session, principal.user_id, payload)


@router.patch("/{line_id}", response_model=CartView)
def update_cart_item(
    line_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Update quantity of a cart line (must be >= 1).

    Returns the updated cart.
    """
    return service.update_quantity(
        session=session,
        user_id=principal.user_id,
        line_id=line_id,
        payload=payload,
    )


@router.delete("/{line_id}", response_model=CartView)
def remove_cart_item(
    line_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Remove a line from the cart. Idempotent.

    Returns the updated cart.
    """
    return service.remove_item(session, principal.user_id, line_id)


@router.delete("", response_model=CartView)
def clear_cart(
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Clear the entire cart.

    Returns an empty cart.
    """
    return service.clear_cart(session, principal.user_id)
