"""Signing and verification of bearer tokens issued by the auth service."""
import logging
from datetime import UTC, datetime, timedelta

import jwt

from core.config import Settings
from models.user import User
from services.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET is not set. Please configure it in the environment.")
    return settings.jwt_secret


def generate_token(user: User, settings: Settings) -> str:
    """
    Sign a token carrying the user's identity claim.

    Payload: ``{id, email, role, iat, exp}``.
    """
    now = datetime.now(UTC)
    payload = {
        "id": user.id,
        "email": user.email,
        "role": str(user.role),
        "iat": now,
        "exp": now + timedelta(seconds=settings.jwt_expires_in),
    }
    return jwt.encode(payload, _require_secret(settings), algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """
    Decode and validate a token signed by generate_token.

    Raises:
        UnauthenticatedError: If the token is malformed, tampered with or expired.
    """
    secret = _require_secret(settings)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "id"]},
        )
    except jwt.PyJWTError as e:
        logger.info("JWT verification failed: %s", e)
        raise UnauthenticatedError("Invalid or expired token") from e

    if not isinstance(payload.get("id"), int):
        raise UnauthenticatedError("Invalid or expired token")
    return payload
