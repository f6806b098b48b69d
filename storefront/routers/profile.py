# storefront/routers/profile.py
import uuid
from typing import Literal

from fastapi import APIRouter, Depends
from sqlmodel import SQLModel

from storefront.core.auth import CurrentPrincipal, require_auth

router = APIRouter(prefix="/users", tags=["Users"])


class PrincipalRead(SQLModel):
    """Who the API thinks the caller is."""

    user_id: uuid.UUID
    email: str
    role: Literal["customer", "admin"]


@router.get("/me", response_model=PrincipalRead)
def read_me(principal: CurrentPrincipal = Depends(require_auth)):
    """
    Return the authenticated principal (id, email, role).

    Auth:
      - Requires valid Supabase JWT.
    """
    return PrincipalRead(
        user_id=principal.user_id,
        email=principal.email,
        role=principal.role,
    )
