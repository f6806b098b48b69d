# storefront/core/auth.py
import uuid
from dataclasses import dataclass
from typing import Any, Literal

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import Forbidden, Unauthorized
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.profile_repo import ProfileRepository

Role = Literal["customer", "admin"]

# auto_error=False => a missing Authorization header does not raise here,
# so require_auth can answer with our own Unauthorized payload.
bearer_scheme = HTTPBearer(auto_error=False)

profile_repo = ProfileRepository()


@dataclass(frozen=True)
class CurrentPrincipal:
    """
    The authenticated caller for one request.

    Injected into routes via Depends(); services receive it (or its
    user_id) explicitly instead of reading any global state.
    """

    user_id: uuid.UUID
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        Unauthorized(401): if token is invalid/expired.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise Unauthorized("Invalid or expired token")


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> CurrentPrincipal | None:
    """
    Resolve the current principal from a Supabase JWT.

    Flow:
      1. No Authorization header => anonymous => None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Look up the profile row for the role.
      4. If missing, auto-provision a customer profile.

    Raises:
        Unauthorized(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise Unauthorized("Token missing sub/email")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise Unauthorized("Invalid sub in token")

    profile = profile_repo.get_by_id(session, user_id)

    # Admins are promoted manually in Supabase, never here.
    if profile is None:
        profile = profile_repo.create(
            session,
            Profile(id=user_id, email=email, role="customer"),
        )

    role: Role = "admin" if profile.role == "admin" else "customer"
    return CurrentPrincipal(user_id=profile.id, email=profile.email, role=role)


def require_auth(
    principal: CurrentPrincipal | None = Depends(get_current_principal),
) -> CurrentPrincipal:
    """
    Enforce authentication. Anonymous callers never get a guest cart;
    they are told to sign in.
    """
    if principal is None:
        raise Unauthorized()
    return principal


def require_admin(
    principal: CurrentPrincipal = Depends(require_auth),
) -> CurrentPrincipal:
    """Route is accessible only if principal.role == "admin"."""
    if not principal.is_admin:
        raise Forbidden("Admin access required")
    return principal


def require_customer(
    principal: CurrentPrincipal = Depends(require_auth),
) -> CurrentPrincipal:
    """
    Only customers hold carts and place orders.

    Use this for:
      - cart endpoints
      - checkout endpoints
      - the customer's own order views
    """
    if principal.role != "customer":
        raise Forbidden("Customer access required")
    return principal
