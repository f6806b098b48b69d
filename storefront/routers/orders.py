# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import CurrentPrincipal, require_customer
from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import OrderDetail, OrderRead
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
service = OrderService(
    order_repo,
    allow_any_transition=get_settings().ALLOW_ANY_STATUS_TRANSITION,
)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, principal.user_id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderDetail,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: CurrentPrincipal = Depends(require_customer),
):
    """
    Get a single order (with payment) belonging to the current user.

    Read-only: customers cannot change status.
    """
    return service.get_user_order(session, principal.user_id, order_id)
