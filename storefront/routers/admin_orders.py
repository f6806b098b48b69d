# storefront/routers/admin_orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.routers.orders import service
from storefront.schemas.order import (
    AdminOrderRow,
    OrderDetail,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
)

router = APIRouter(
    prefix="/admin/orders",
    tags=["Admin Orders"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=list[AdminOrderRow])
def list_orders(
    status: OrderStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
    session: Session = Depends(get_session),
):
    """
    All orders with customer contact fields, newest first (admin only).

    Query params (optional):
      - status: exact status filter
      - search: order id, customer name, phone or email
      - skip / limit
    """
    return service.list_admin_orders(session, status, search, skip, limit)


@router.get("/reconciliation", response_model=list[OrderRead])
def list_orders_missing_payment(
    skip: int = 0,
    limit: int = 50,
    session: Session = Depends(get_session),
):
    """
    Orders that have no payment record and need operator follow-up.
    """
    return service.list_orders_missing_payment(session, skip, limit)


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with its payment (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      cod_pending -> processing, shipped, delivered, cancelled

      processing  -> shipped, delivered, cancelled

      shipped     -> delivered, cancelled

      delivered, cancelled -> (terminal)

    """
    return service.set_status(session, order_id, payload)


@router.post(
    "/{order_id}/payment",
    response_model=OrderDetail,
    status_code=status.HTTP_201_CREATED,
)
def record_missing_payment(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Create the pending payment record for an order that lacks one.
    """
    return service.record_missing_payment(session, order_id)
