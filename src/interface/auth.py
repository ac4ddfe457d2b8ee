"""Bearer-token identification of the acting user."""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from src.core.config import settings
from src.services import identity_service


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_TOKEN_SALT = "access-token"


def _serializer() -> URLSafeTimedSerializer:
    secret = settings.require_credential("secret_key", "Access token")
    return URLSafeTimedSerializer(secret, salt=_TOKEN_SALT)


def issue_access_token(user_id: str) -> str:
    """Sign an access token naming ``user_id``."""
    return _serializer().dumps({"user_id": str(user_id)})


def read_access_token(token: str) -> str | None:
    """Return the user id inside a valid token, or None if it is tampered or expired."""
    try:
        data = _serializer().loads(token, max_age=settings.access_token_max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict):
        return None
    return data.get("user_id")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the acting user id from the Authorization header."""
    if credentials is None:
        logger.warning("auth_missing_token")
        raise _unauthorized("Missing access token")

    user_id = read_access_token(credentials.credentials)
    if user_id is None:
        logger.warning("auth_tampered_or_expired")
        raise _unauthorized("Invalid or expired access token")

    user = await identity_service.get_user_or_none(user_id=user_id)
    if user is None:
        logger.warning("auth_unknown_user", extra={"user_id": user_id})
        raise _unauthorized("Unknown user")

    if user.get("is_banned"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")

    if not user.get("is_active"):
        logger.warning("auth_inactive_user", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

    return user_id


async def require_admin(actor_id: str = Depends(require_actor)) -> str:
    """Resolve the acting user id and require the admin role."""
    if not await identity_service.is_admin(user_id=actor_id):
        logger.warning("auth_admin_required", extra={"user_id": actor_id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return actor_id
