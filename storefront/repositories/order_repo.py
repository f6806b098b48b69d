# storefront/repositories/order_repo.py
import uuid

from sqlalchemy import cast, func, or_
from sqlalchemy.types import String
from sqlmodel import Session, select

from storefront.models.order import Order, Payment
from storefront.models.profile import Profile


class OrderRepository:
    """
    Data access layer for orders and payments.

    NOTE:
      - Insert helpers do not commit; checkout is a multi-step transaction
        and the service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_by_checkout_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        token: str,
    ) -> Order | None:
        stmt = select(Order).where(
            Order.user_id == user_id,
            Order.checkout_token == token,
        )
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    # ---- Admin view ----

    def list_admin_rows(
        self,
        session: Session,
        status: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[dict]:
        """
        Orders joined with the customer's profile email, newest first.

        Returns plain mappings; the service decodes them into typed rows.
        """
        stmt = select(Order, Profile.email).outerjoin(
            Profile, Profile.id == Order.user_id
        )
        if status:
            stmt = stmt.where(Order.status == status)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(cast(Order.id, String)).like(pattern),
                    func.lower(Order.customer_name).like(pattern),
                    func.lower(Order.customer_phone).like(pattern),
                    func.lower(Profile.email).like(pattern),
                )
            )
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)

        rows = []
        for order, email in session.exec(stmt).all():
            row = order.model_dump()
            row["customer_email"] = email
            rows.append(row)
        return rows

    def list_without_payment(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .outerjoin(Payment, Payment.order_id == Order.id)
            .where(Payment.id == None)  # noqa: E711
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    # ---- Payments ----

    def get_payment_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> Payment | None:
        stmt = select(Payment).where(Payment.order_id == order_id)
        return session.exec(stmt).first()

    def create_payment(self, session: Session, payment: Payment) -> Payment:
        """
        Insert a Payment without committing.
        """
        session.add(payment)
        session.flush()
        session.refresh(payment)
        return payment
