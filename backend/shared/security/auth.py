"""
Authentication and authorization utilities.

Tokens are issued by the auth service; this backend only verifies them
to learn who is acting (``sub``) and with which role (``role``).
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header, HTTPException, status

from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger, audit_auth_event
from shared.config.constants import Roles
from shared.utils.exceptions import ForbiddenError, InsufficientRoleError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
) -> str:
    """
    Sign an access token with the given payload.

    Mirrors the auth service's token format; used by tooling and tests.

    Args:
        payload: Claims to include in the token (sub, role, restaurant_id).
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "sub": str(payload["sub"]),
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Args:
        token: The JWT token string.

    Returns:
        Decoded token claims plus ``user_id`` (int).

    Raises:
        HTTPException: If token is invalid, expired, or missing required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        audit_auth_event("TOKEN_EXPIRED", success=False)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
        )
    except jwt.InvalidTokenError as e:
        audit_auth_event("TOKEN_INVALID", success=False, reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    if "role" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing role claim",
        )

    try:
        payload["user_id"] = int(payload["sub"])
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed subject claim",
        )

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.post("/api/orders")
        def create_order(ctx = Depends(current_user_context)):
            customer_id = ctx["user_id"]
            ...

    Returns:
        Dict with: user_id, sub, role, restaurant_id (optional)
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


def require_roles(ctx: dict[str, Any], allowed: frozenset[str] | list[str]) -> None:
    """
    Verify that the user has one of the allowed roles.

    Raises:
        InsufficientRoleError: If user lacks required role.
    """
    if ctx.get("role") not in allowed:
        audit_auth_event(
            "ROLE_DENIED",
            user_id=ctx.get("user_id"),
            success=False,
            role=ctx.get("role"),
        )
        raise InsufficientRoleError(sorted(allowed), user_id=ctx.get("user_id"))


def require_restaurant_access(ctx: dict[str, Any], restaurant_id: int) -> None:
    """
    Verify that the user may act on the given restaurant's data.

    super_admin reaches every restaurant; everyone else needs a
    ``restaurant_id`` claim equal to restaurant_id.

    Raises:
        ForbiddenError: If the claim is missing or names another restaurant.
    """
    if ctx.get("role") == Roles.SUPER_ADMIN:
        return

    claim = ctx.get("restaurant_id")
    try:
        allowed = claim is not None and int(claim) == restaurant_id
    except (TypeError, ValueError):
        allowed = False

    if not allowed:
        audit_auth_event(
            "RESTAURANT_DENIED",
            user_id=ctx.get("user_id"),
            success=False,
            role=ctx.get("role"),
            restaurant_id=restaurant_id,
        )
        raise ForbiddenError(
            f"access restaurant {restaurant_id}",
            user_id=ctx.get("user_id"),
        )
