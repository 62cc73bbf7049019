"""HTTP client that exchanges a caller's bearer token for an identity claim."""
import logging

import httpx

from schemas.identity import IdentityClaim
from services.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

TOKEN_NOT_PROVIDED = "Token not provided"
INVALID_OR_EXPIRED = "Invalid or expired token"


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token part of an ``Authorization: Bearer <token>`` header.

    The scheme match is case-sensitive and the token is returned as sent. Returns
    None for a missing header, a different scheme or a blank token.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token if token.strip() else None


class RemoteIdentityClient:
    """
    Verifies bearer tokens against the auth service.

    Every failure is reported as UnauthenticatedError. The message tells a
    malformed header ("Token not provided") apart from a rejected or
    unverifiable token ("Invalid or expired token"); callers never see whether
    the auth service was unreachable.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 5.0,
    ) -> None:
        self._http = http_client
        self._verify_url = f"{base_url.rstrip('/')}/auth/verify"
        self._timeout = timeout

    async def verify(self, authorization: str | None) -> IdentityClaim:
        """
        Resolve the caller's identity.

        Makes exactly one GET request, forwarding the header unchanged. No retry,
        no caching.

        Raises:
            UnauthenticatedError: On any header, network, status or payload problem.
        """
        if extract_bearer_token(authorization) is None:
            raise UnauthenticatedError(TOKEN_NOT_PROVIDED)

        try:
            response = await self._http.get(
                self._verify_url,
                headers={"Authorization": authorization},
                timeout=self._timeout,
            )
            response.raise_for_status()
            user = response.json().get("user")
            if not user:
                raise ValueError("verify response carries no user")
            return IdentityClaim.model_validate(user)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Auth service rejected token with status %s", e.response.status_code,
            )
            raise UnauthenticatedError(INVALID_OR_EXPIRED) from e
        except httpx.HTTPError as e:
            logger.warning("Auth verification call failed: %s", e)
            raise UnauthenticatedError(INVALID_OR_EXPIRED) from e
        except (ValueError, AttributeError) as e:
            logger.warning("Auth service returned an unusable identity: %s", e)
            raise UnauthenticatedError(INVALID_OR_EXPIRED) from e
