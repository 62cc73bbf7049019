"""Service layer for a user's favorite properties."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clients.profile_client import RemoteProfileClient
from models.favorite import Favorite
from schemas.favorite import EnrichedFavorite, FavoriteCreate, FavoriteResponse, FavoriteUpdate
from schemas.identity import IdentityClaim
from schemas.property import PropertyResponse
from services.exceptions import (
    DuplicateFavoriteError,
    FavoriteNotFoundError,
    UnauthenticatedError,
)
from services.property_service import PropertyService

logger = logging.getLogger(__name__)


class FavoriteService:
    """
    Favorites are strictly owner-scoped: a favorite belonging to someone else is
    reported as not found, and admins get no override.

    Every favorite returned is enriched with its property and its user's profile.
    Unlike property reads this is not best-effort; any lookup failure fails the
    request.
    """

    def __init__(
        self,
        db: AsyncSession,
        property_service: PropertyService,
        profile_client: RemoteProfileClient,
    ) -> None:
        self._db = db
        self._properties = property_service
        self._profiles = profile_client

    async def _enrich(self, favorite: Favorite, authorization: str | None) -> EnrichedFavorite:
        prop = await self._properties.get_property_row(favorite.property_id)
        if not authorization:
            raise UnauthenticatedError("Authorization header is missing")
        user = await self._profiles.fetch_user(favorite.user_id, authorization)
        return EnrichedFavorite(
            **FavoriteResponse.model_validate(favorite).model_dump(),
            property=PropertyResponse.model_validate(prop),
            user=user,
        )

    async def _get_owned(self, favorite_id: int, identity: IdentityClaim) -> Favorite:
        favorite = await self._db.get(Favorite, favorite_id)
        if favorite is None or favorite.user_id != identity.id:
            raise FavoriteNotFoundError(favorite_id)
        return favorite

    async def _ensure_not_duplicate(self, user_id: int, property_id: int) -> None:
        result = await self._db.execute(
            select(Favorite.id).where(
                Favorite.user_id == user_id,
                Favorite.property_id == property_id,
            ),
        )
        if result.first() is not None:
            raise DuplicateFavoriteError(user_id, property_id)

    async def _flush_or_duplicate(self, user_id: int, property_id: int) -> None:
        try:
            await self._db.flush()
        except IntegrityError as e:
            # A concurrent request inserted the same pair after our pre-check
            await self._db.rollback()
            raise DuplicateFavoriteError(user_id, property_id) from e

    async def list_favorites(
        self,
        identity: IdentityClaim,
        authorization: str | None,
    ) -> list[EnrichedFavorite]:
        """The caller's favorites, oldest first. Enriched one at a time."""
        result = await self._db.execute(
            select(Favorite).where(Favorite.user_id == identity.id).order_by(Favorite.id),
        )
        return [
            await self._enrich(favorite, authorization)
            for favorite in result.scalars().all()
        ]

    async def get_favorite(
        self,
        favorite_id: int,
        identity: IdentityClaim,
        authorization: str | None,
    ) -> EnrichedFavorite:
        """
        One of the caller's favorites.

        Raises:
            FavoriteNotFoundError: If absent or owned by another user.
            PropertyNotFoundError: If the referenced property was deleted.
        """
        favorite = await self._get_owned(favorite_id, identity)
        return await self._enrich(favorite, authorization)

    async def add_favorite(
        self,
        data: FavoriteCreate,
        identity: IdentityClaim,
        authorization: str | None,
    ) -> EnrichedFavorite:
        """
        Save a property for the caller.

        Raises:
            PropertyNotFoundError: If the property does not exist.
            DuplicateFavoriteError: If the caller already saved it.

        Note:
            Does not commit. Caller (session generator) handles commit at request end.
        """
        await self._properties.get_property_row(data.property_id)
        await self._ensure_not_duplicate(identity.id, data.property_id)

        favorite = Favorite(user_id=identity.id, property_id=data.property_id)
        self._db.add(favorite)
        await self._flush_or_duplicate(identity.id, data.property_id)
        await self._db.refresh(favorite)
        logger.info("User %s favorited property %s", identity.id, data.property_id)
        return await self._enrich(favorite, authorization)

    async def update_favorite(
        self,
        favorite_id: int,
        data: FavoriteUpdate,
        identity: IdentityClaim,
        authorization: str | None,
    ) -> EnrichedFavorite:
        """
        Point an existing favorite at a different property.

        Raises:
            FavoriteNotFoundError: If absent or owned by another user.
            PropertyNotFoundError: If the new property does not exist.
            DuplicateFavoriteError: If the caller already saved the new property.
        """
        favorite = await self._get_owned(favorite_id, identity)
        await self._properties.get_property_row(data.property_id)
        if favorite.property_id != data.property_id:
            await self._ensure_not_duplicate(identity.id, data.property_id)
            favorite.property_id = data.property_id
            await self._flush_or_duplicate(identity.id, data.property_id)
            await self._db.refresh(favorite)
        return await self._enrich(favorite, authorization)

    async def remove_favorite(self, favorite_id: int, identity: IdentityClaim) -> None:
        """
        Delete one of the caller's favorites.

        Raises:
            FavoriteNotFoundError: If absent or owned by another user.
        """
        favorite = await self._get_owned(favorite_id, identity)
        await self._db.delete(favorite)
        await self._db.flush()
