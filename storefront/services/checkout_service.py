# storefront/services/checkout_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.core.errors import (
    CheckoutUnavailable,
    EmptyCart,
    NotFound,
    TransactionPartialFailure,
    ValidationError,
)
from storefront.models.order import Order, Payment
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.checkout import CheckoutRequest
from storefront.schemas.order import OrderDetail
from storefront.services import pricing
from storefront.services.order_service import build_order_detail

logger = logging.getLogger(__name__)

REQUIRED_SHIPPING_FIELDS = ("customer_name", "customer_address", "customer_phone")

# Initial status per payment method; only COD is wired up.
INITIAL_STATUS = {
    "cod": "cod_pending",
}


class CheckoutService:
    """
    Turns the caller's cart into an Order + Payment.

    Steps:
      0. Replay: same checkout_token => return the existing order.
      1. Load the cart; error if empty.
      2. Validate shipping fields and zone.
      3. Re-price every line from the live catalog (client totals are
         never trusted).
      4. In ONE transaction: insert Order, insert Payment, delete cart lines.
      5. Commit and return the order with its payment.

    Any failure inside step 4 rolls everything back, so the customer never
    sees an order without a payment or a half-cleared cart. A token clash
    on the Order insert means a concurrent request with the same token
    already placed the order; that order is returned.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        catalog_repo,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.catalog_repo = catalog_repo

    def checkout(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CheckoutRequest,
    ) -> OrderDetail:
        # 0) Idempotent retry
        if payload.checkout_token:
            previous = self.order_repo.get_by_checkout_token(
                session, user_id, payload.checkout_token
            )
            if previous is not None:
                logger.info(
                    "Checkout replay for user %s returned order %s",
                    user_id,
                    previous.id,
                )
                payment = self.order_repo.get_payment_for_order(session, previous.id)
                return build_order_detail(previous, payment)

        # 1) Cart; an empty cart wins over any form error
        cart_items = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise EmptyCart()

        # 2) Shipping + zone
        missing = [f for f in REQUIRED_SHIPPING_FIELDS if not getattr(payload, f)]
        if missing:
            raise ValidationError(
                "Please fill in all delivery details",
                fields=missing,
            )
        zone = pricing.get_zone(payload.delivery_zone)

        # 3) Re-price from the catalog
        products = self.catalog_repo.get_products(
            session, list({ci.product_id for ci in cart_items})
        )
        gone = sorted(
            {str(ci.product_id) for ci in cart_items if ci.product_id not in products}
        )
        if gone:
            raise NotFound(
                "Some products in your cart are no longer available",
                product_ids=gone,
            )

        snapshot = pricing.compute_pricing(
            ((products[ci.product_id].price, ci.quantity) for ci in cart_items),
            zone,
        )

        # 4) Order + Payment + cart clear, one commit
        order = Order(
            user_id=user_id,
            status=INITIAL_STATUS.get(payload.payment_method, "payment_pending"),
            payment_method=payload.payment_method,
            subtotal=snapshot.subtotal,
            delivery_charge=snapshot.delivery_charge,
            total_price=snapshot.subtotal,
            grand_total=snapshot.grand_total,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            customer_address=payload.customer_address,
            delivery_zone=zone.id,
            checkout_token=payload.checkout_token,
        )

        try:
            order = self.order_repo.create_order(session, order)
        except IntegrityError as exc:
            # (user_id, checkout_token) is unique: a concurrent request with
            # the same token got there first.
            session.rollback()
            previous = None
            if payload.checkout_token:
                previous = self.order_repo.get_by_checkout_token(
                    session, user_id, payload.checkout_token
                )
            if previous is None:
                logger.exception("Order insert failed for user %s", user_id)
                raise CheckoutUnavailable() from exc
            logger.info(
                "Concurrent checkout for user %s resolved to order %s",
                user_id,
                previous.id,
            )
            payment = self.order_repo.get_payment_for_order(session, previous.id)
            return build_order_detail(previous, payment)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Order insert failed for user %s", user_id)
            raise CheckoutUnavailable() from exc

        order_id = order.id

        try:
            payment = self.order_repo.create_payment(
                session,
                Payment(
                    order_id=order_id,
                    amount=snapshot.grand_total,
                    status="pending",
                    payment_method=payload.payment_method,
                ),
            )
        except SQLAlchemyError as exc:
            session.rollback()
            self._report_partial("payment", user_id, order_id)
            raise TransactionPartialFailure("payment") from exc

        try:
            self.cart_repo.delete_for_user(session, user_id)
        except SQLAlchemyError as exc:
            session.rollback()
            self._report_partial("cart_clear", user_id, order_id)
            raise TransactionPartialFailure("cart_clear") from exc

        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Checkout commit failed for user %s", user_id)
            raise CheckoutUnavailable() from exc

        session.refresh(order)
        session.refresh(payment)

        logger.info(
            "Order %s placed by user %s: subtotal=%d delivery=%d grand_total=%d zone=%s",
            order.id,
            user_id,
            order.subtotal,
            order.delivery_charge,
            order.grand_total,
            order.delivery_zone,
        )
        return build_order_detail(order, payment)

    @staticmethod
    def _report_partial(stage: str, user_id: uuid.UUID, order_id: uuid.UUID) -> None:
        # Operators grep for "transaction_partial_failure".
        logger.exception(
            "transaction_partial_failure stage=%s user=%s order=%s (rolled back)",
            stage,
            user_id,
            order_id,
        )
