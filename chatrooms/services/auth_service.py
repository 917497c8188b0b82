"""
Caller identity resolution.

Identity is issued and validated upstream; this module only extracts the
principal that the rest of the app compares against room owners, members
and message senders.

Sources, in order:
- the trusted principal header set by the gateway (default: X-Principal).
  Any client can send this header, so the gateway must strip it from
  incoming requests. Set TRUST_PRINCIPAL_HEADER=false when the service is
  reachable without such a gateway; then only bearer tokens are accepted.
- the "sub" claim of an "Authorization: Bearer <jwt>" token signed with JWT_SECRET
"""

from typing import Optional

from fastapi import HTTPException, Request, status
from jose import jwt, JWTError

from chatrooms.core.config import Settings
from chatrooms.core.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def principal_from_token(token: str, settings: Settings) -> str:
    """Verify a bearer token and return its subject."""
    if not settings.JWT_SECRET:
        logger.warning("Bearer token received but JWT_SECRET is not configured")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Bearer tokens are not accepted")

    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Invalid bearer token: {e}")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")

    subject = claims.get("sub")
    if not subject:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token has no subject")
    return str(subject)


def resolve_principal(request: Request, settings: Settings) -> Optional[str]:
    if settings.TRUST_PRINCIPAL_HEADER:
        principal = request.headers.get(settings.PRINCIPAL_HEADER, "").strip()
        if principal:
            return principal

    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        return principal_from_token(authorization[len(BEARER_PREFIX):].strip(), settings)

    return None


async def get_current_principal(request: Request) -> str:
    """
    Get the calling principal.
    Use as dependency for every room and message endpoint.
    """
    principal = resolve_principal(request, request.app.state.settings)
    if not principal:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    return principal
