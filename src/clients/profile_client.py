"""HTTP client for fetching user profiles from the user service."""
import logging

import httpx

from schemas.identity import UserProfile
from services.exceptions import ProfileFetchFailedError

logger = logging.getLogger(__name__)


class RemoteProfileClient:
    """
    Fetches a user's public profile on behalf of a caller.

    The caller's Authorization header is forwarded verbatim since the user
    service requires authentication for every read.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 5.0,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def fetch_user(self, user_id: int, authorization: str | None) -> UserProfile:
        """
        Fetch one profile.

        Raises:
            ProfileFetchFailedError: If no header is given or the call fails for any
                reason, including the user not existing.
        """
        if not authorization:
            logger.warning("No authorization header available to fetch user %s", user_id)
            raise ProfileFetchFailedError(user_id)

        try:
            response = await self._http.get(
                f"{self._base_url}/users/{user_id}",
                headers={"Authorization": authorization},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return UserProfile.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(
                "User service returned %s for user %s", e.response.status_code, user_id,
            )
            raise ProfileFetchFailedError(user_id) from e
        except httpx.HTTPError as e:
            logger.warning("Error fetching user %s: %s", user_id, e)
            raise ProfileFetchFailedError(user_id) from e
        except ValueError as e:
            logger.warning("User service returned an unusable profile for %s: %s", user_id, e)
            raise ProfileFetchFailedError(user_id) from e
