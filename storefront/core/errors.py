# storefront/core/errors.py
"""
Error taxonomy for the storefront core.

Every error is an HTTPException so services can raise it directly and
FastAPI renders it without extra handlers. The response body is:

    {"detail": {"code": "<machine code>", "message": "...", ...extra}}

Clients branch on `code`; `message` is for humans.
"""
from typing import Any

from fastapi import HTTPException, status


class StorefrontError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    message: str = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        headers: dict[str, str] | None = None,
        **extra: Any,
    ):
        self.message = message or self.message
        self.extra = extra
        detail = {"code": self.code, "message": self.message, **extra}
        super().__init__(
            status_code=self.status_code,
            detail=detail,
            headers=headers,
        )


class ValidationError(StorefrontError):
    """Missing or malformed user input. `fields` names what to fix."""

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    code = "validation_error"
    message = "Invalid input"


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Not found"


class EmptyCart(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    code = "empty_cart"
    message = "Cart is empty"

    def __init__(self, message: str | None = None, **extra: Any):
        extra.setdefault("redirect", "/cart")
        super().__init__(message, **extra)


class InvalidZone(StorefrontError):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    code = "invalid_zone"
    message = "Unknown delivery zone"


class OutOfStock(StorefrontError):
    """
    Advisory only: stock is never reserved, so a later purchase
    can still race with other customers.
    """

    status_code = status.HTTP_409_CONFLICT
    code = "out_of_stock"
    message = "Product is out of stock"


class InvalidStatusTransition(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_status_transition"
    message = "Status transition not allowed"


class Unauthorized(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    message = "Authentication required"

    def __init__(self, message: str | None = None, **extra: Any):
        extra.setdefault("redirect", "/login")
        super().__init__(
            message,
            headers={"WWW-Authenticate": "Bearer"},
            **extra,
        )


class Forbidden(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Not allowed for this role"


class CheckoutUnavailable(StorefrontError):
    """Nothing was persisted; the client may retry with the same token."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "checkout_unavailable"
    message = "Could not place the order, please try again"


class TransactionPartialFailure(StorefrontError):
    """
    A checkout write failed after an earlier one in the same checkout
    succeeded. The transaction is rolled back, but the event is reported
    with its own code so operators can follow up.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "transaction_partial_failure"
    message = "Checkout was interrupted, please try again"

    def __init__(self, stage: str, message: str | None = None, **extra: Any):
        self.stage = stage
        super().__init__(message, stage=stage, **extra)


class MalformedRecord(StorefrontError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "malformed_record"
    message = "The data store returned an unexpected record"


class PaymentAlreadyRecorded(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    code = "payment_exists"
    message = "Order already has a payment record"
