"""Principal resolution dependencies for gate requests."""

from __future__ import annotations

import httpx
import jwt
import structlog
from fastapi import Depends, HTTPException, Request

from erpgate.config.settings import get_settings
from erpgate.exceptions import IdentityError
from erpgate.models.domain import OrgBindings, Principal

logger = structlog.get_logger(__name__)

USER_ID_HEADER = "x-user-id"
USER_ROLE_HEADER = "x-user-role"
USER_EMAIL_HEADER = "x-user-email"
COMPANY_ID_HEADER = "x-user-company-id"
BRAND_ID_HEADER = "x-user-brand-id"
STORE_ID_HEADER = "x-user-store-id"


async def get_principal(request: Request) -> Principal | None:
    """Resolve the caller, or None when the request carries no identity.

    In header mode, trusts the X-User-* headers set by an upstream identity proxy.
    In clerk mode, verifies the Bearer JWT; a present but invalid token is a 401.
    """
    settings = get_settings()

    if settings.auth_mode == "header":
        return principal_from_headers(request)

    return await _resolve_clerk_principal(request)


async def require_principal(
    principal: Principal | None = Depends(get_principal),
) -> Principal:
    if principal is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return principal


def principal_from_headers(request: Request) -> Principal | None:
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    if not user_id:
        return None
    headers = request.headers
    return Principal(
        user_id=user_id,
        role=headers.get(USER_ROLE_HEADER, "").strip(),
        email=headers.get(USER_EMAIL_HEADER, ""),
        bindings=OrgBindings(
            company_id=headers.get(COMPANY_ID_HEADER) or None,
            brand_id=headers.get(BRAND_ID_HEADER) or None,
            store_id=headers.get(STORE_ID_HEADER) or None,
        ),
    )


async def _resolve_clerk_principal(request: Request) -> Principal | None:
    """Resolve the principal from a Clerk JWT Bearer token."""
    from erpgate.web.auth.clerk import verify_clerk_token

    auth_header = request.headers.get("authorization", "")
    if not auth_header:
        return None
    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Malformed Authorization header")

    token = auth_header[7:]
    try:
        claims = await verify_clerk_token(token)
    except (jwt.PyJWTError, IdentityError, httpx.HTTPError, ValueError) as exc:
        logger.warning("clerk_token_invalid", error=str(exc))
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    return Principal(
        user_id=claims.sub,
        role=claims.role,
        email=claims.email,
        bindings=OrgBindings(
            company_id=claims.company_id,
            brand_id=claims.brand_id,
            store_id=claims.store_id,
        ),
    )
