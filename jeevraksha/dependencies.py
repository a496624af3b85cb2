"""Request-scoped auth dependencies.

The caller's role is read from ``profiles`` once, when the bearer token is
resolved, and carried on ``AuthUser``; routes then gate on it with
``require_role``.
"""

import logging

from fastapi import Depends, Header, HTTPException

from jeevraksha.database import get_db
from jeevraksha.models.common import Role
from jeevraksha.models.profile import AuthUser
from jeevraksha.services.auth_client import AuthServiceError, HostedAuthClient, get_auth_client

logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _resolve_user(token: str, auth_client: HostedAuthClient) -> AuthUser:
    user = await auth_client.get_user(token)
    db = await get_db()
    profile = await db.fetch_one("SELECT role FROM profiles WHERE id = ?", (user["id"],))
    role = Role.CITIZEN
    if profile:
        try:
            role = Role(profile["role"])
        except ValueError:
            logger.warning("Unknown role %r on profile %s", profile["role"], user["id"])
    return AuthUser(id=user["id"], email=user.get("email"), role=role, token=token)


async def get_current_user(
    authorization: str | None = Header(None),
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> AuthUser:
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        return await _resolve_user(token, auth_client)
    except AuthServiceError as e:
        if e.status_code >= 500:
            raise HTTPException(status_code=503, detail=e.message) from None
        raise HTTPException(status_code=403, detail="Invalid or expired token") from None


async def get_optional_user(
    authorization: str | None = Header(None),
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> AuthUser | None:
    """Like ``get_current_user`` but anonymous callers and bad tokens yield None."""
    token = _bearer_token(authorization)
    if not token:
        return None
    try:
        return await _resolve_user(token, auth_client)
    except AuthServiceError as e:
        logger.info("Ignoring unusable token on optional-auth route: %s", e.message)
        return None


def require_role(*roles: Role):
    allowed = set(roles)

    async def _check(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed:
            logger.warning("User %s with role %s denied (needs %s)", user.id, user.role.value,
                           ", ".join(sorted(r.value for r in allowed)))
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _check
