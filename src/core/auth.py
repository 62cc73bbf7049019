"""
Authorization guard for services that delegate token checks to the auth service.

Protected routes depend on ``get_current_identity``. It forwards the caller's
Authorization header to the auth service and either yields an IdentityClaim or
rejects the request with 401. Ownership rules are applied afterwards by the
resource services through ``ensure_owner_or_admin``.
"""
import logging

import httpx
from fastapi import Depends, Header, Request

from clients.identity_client import RemoteIdentityClient
from core.config import Settings, get_settings
from core.http_client import get_http_client
from schemas.identity import IdentityClaim
from services.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


def get_identity_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> RemoteIdentityClient:
    """Build the identity client for the current request."""
    return RemoteIdentityClient(
        http_client,
        base_url=settings.auth_service_url,
        timeout=settings.http_timeout,
    )


async def get_authorization_header(
    authorization: str | None = Header(default=None),
) -> str | None:
    """Raw Authorization header, or None. Used for forwarding to other services."""
    return authorization


async def get_current_identity(
    request: Request,
    authorization: str | None = Depends(get_authorization_header),
    identity_client: RemoteIdentityClient = Depends(get_identity_client),
) -> IdentityClaim:
    """
    Dependency that resolves the caller's identity or rejects with 401.

    The resolved claim is also stored on ``request.state.identity`` for the rest
    of the request.
    """
    identity = await identity_client.verify(authorization)
    request.state.identity = identity
    return identity


def ensure_owner_or_admin(identity: IdentityClaim, owner_id: int) -> None:
    """
    Allow the resource owner or any admin.

    Raises:
        ForbiddenError: If the caller is neither.
    """
    if identity.id == owner_id or identity.is_admin:
        return
    logger.info("User %s denied access to resource owned by %s", identity.id, owner_id)
    raise ForbiddenError()
