# storefront/services/order_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.errors import (
    InvalidStatusTransition,
    NotFound,
    PaymentAlreadyRecorded,
)
from storefront.core.records import decode_records
from storefront.models.order import Order, Payment
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import (
    AdminOrderRow,
    OrderDetail,
    OrderRead,
    OrderStatusUpdate,
    PaymentRead,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({"delivered", "cancelled"})

# Forward-only fulfillment graph. Skipping ahead is allowed (a COD order can
# be marked delivered directly); moving back is not.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "cod_pending": frozenset({"processing", "shipped", "delivered", "cancelled"}),
    "payment_pending": frozenset({"processing", "shipped", "delivered", "cancelled"}),
    "processing": frozenset({"shipped", "delivered", "cancelled"}),
    "shipped": frozenset({"delivered", "cancelled"}),
    "delivered": frozenset(),
    "cancelled": frozenset(),
}


def build_order_detail(order: Order, payment: Payment | None) -> OrderDetail:
    """
    Compose OrderDetail from ORM models.
    """
    return OrderDetail(
        **OrderRead.model_validate(order, from_attributes=True).model_dump(),
        payment=(
            PaymentRead.model_validate(payment, from_attributes=True)
            if payment is not None
            else None
        ),
    )


class OrderService:
    """
    Business logic for placed orders.

    Responsibilities:
      - customer read views (own orders only)
      - admin fulfillment view (all orders, denormalized)
      - status lifecycle, admin only
      - reconciliation of orders that lack a payment record
    """

    def __init__(self, order_repo: OrderRepository, allow_any_transition: bool = False):
        self.order_repo = order_repo
        self.allow_any_transition = allow_any_transition

    # -------- Customer operations --------

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """
        List orders for the given user, newest first.
        """
        return self.order_repo.list_for_user(session, user_id, skip, limit)

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderDetail:
        """
        Get a single order for the user, including its payment.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise NotFound("Order not found", order_id=str(order_id))

        payment = self.order_repo.get_payment_for_order(session, order.id)
        return build_order_detail(order, payment)

    # -------- Admin operations --------

    def list_admin_orders(
        self,
        session: Session,
        status: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[AdminOrderRow]:
        """
        Admin listing with customer email, newest first.

        `search` matches order id, customer name, phone or email.
        """
        rows = self.order_repo.list_admin_rows(
            session,
            status=status,
            search=search.strip() if search else None,
            skip=skip,
            limit=limit,
        )
        return decode_records(AdminOrderRow, rows)

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderDetail:
        order = self._get_order(session, order_id)
        payment = self.order_repo.get_payment_for_order(session, order.id)
        return build_order_detail(order, payment)

    def can_transition(self, current: str, new: str) -> bool:
        if self.allow_any_transition or current == new:
            return True
        return new in ALLOWED_TRANSITIONS.get(current, frozenset())

    def set_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Admin-only status update.

          cod_pending / payment_pending -> processing, shipped, delivered, cancelled
          processing -> shipped, delivered, cancelled
          shipped    -> delivered, cancelled
          delivered, cancelled -> (terminal)

        Setting the current status again is a no-op. Only `status` changes;
        the frozen totals are never touched.
        """
        order = self._get_order(session, order_id)

        current = order.status
        new = payload.status

        if current == new:
            return order

        if not self.can_transition(current, new):
            raise InvalidStatusTransition(
                f"Invalid status transition: {current} -> {new}",
                current=current,
                requested=new,
                allowed=sorted(ALLOWED_TRANSITIONS.get(current, ())),
            )

        order.status = new
        order = self.order_repo.update_order(session, order)
        logger.info("Order %s status %s -> %s", order.id, current, new)
        return order

    # -------- Reconciliation --------

    def list_orders_missing_payment(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """
        Orders with no payment row. Checkout never leaves these behind; they
        come from clients writing to the shared database directly.
        """
        return self.order_repo.list_without_payment(session, skip, limit)

    def record_missing_payment(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderDetail:
        """
        Operator fix-up: add the pending payment an order should have had.
        """
        order = self._get_order(session, order_id)
        if self.order_repo.get_payment_for_order(session, order.id) is not None:
            raise PaymentAlreadyRecorded(order_id=str(order.id))

        try:
            payment = self.order_repo.create_payment(
                session,
                Payment(
                    order_id=order_id,
                    amount=order.grand_total,
                    status="pending",
                    payment_method=order.payment_method,
                ),
            )
            session.commit()
        except IntegrityError as exc:
            # payments.order_id is unique; another operator got there first.
            session.rollback()
            raise PaymentAlreadyRecorded(order_id=str(order_id)) from exc
        session.refresh(payment)
        logger.info("Recorded missing payment %s for order %s", payment.id, order.id)
        return build_order_detail(order, payment)

    # -------- Helpers --------

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFound("Order not found", order_id=str(order_id))
        return order
