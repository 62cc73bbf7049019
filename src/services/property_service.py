"""Service layer for property listings."""
import logging
from collections.abc import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from clients.profile_client import RemoteProfileClient
from core.auth import ensure_owner_or_admin
from models.property import Property
from schemas.identity import IdentityClaim, UserProfile
from schemas.property import (
    PropertyCreate,
    PropertySearch,
    PropertyUpdate,
    PropertyWithOwner,
)
from services.enrichment import EnrichmentStrategy, SequentialEnrichment
from services.exceptions import (
    OwnerProfileUnavailableError,
    ProfileFetchFailedError,
    PropertyNotFoundError,
)

logger = logging.getLogger(__name__)


class PropertyService:
    """
    CRUD and search over properties.

    Reads are public. When the caller sent an Authorization header, each property
    is enriched with its owner's profile on a best-effort basis: a failed owner
    fetch leaves that property bare rather than failing the request.
    """

    def __init__(
        self,
        db: AsyncSession,
        profile_client: RemoteProfileClient,
        enrichment: EnrichmentStrategy | None = None,
    ) -> None:
        self._db = db
        self._profiles = profile_client
        self._enrichment = enrichment or SequentialEnrichment()

    async def _enrich(
        self,
        properties: Sequence[Property],
        authorization: str | None,
    ) -> list[PropertyWithOwner]:
        items = [PropertyWithOwner.model_validate(p) for p in properties]
        if not authorization or not items:
            return items

        async def fetch_owner(owner_id: int) -> UserProfile:
            return await self._profiles.fetch_user(owner_id, authorization)

        owners = await self._enrichment.fetch_all(
            [item.owner_id for item in items], fetch_owner,
        )
        for item, owner in zip(items, owners, strict=True):
            if owner is not None:
                item.owner = owner
        return items

    async def _fetch(self, query: Select) -> list[Property]:
        result = await self._db.execute(query.order_by(Property.id))
        return list(result.scalars().all())

    async def get_property_row(self, property_id: int) -> Property:
        """
        Load a property without enrichment.

        Raises:
            PropertyNotFoundError: If no property has this id.
        """
        prop = await self._db.get(Property, property_id)
        if prop is None:
            raise PropertyNotFoundError(property_id)
        return prop

    async def list_properties(self, authorization: str | None) -> list[PropertyWithOwner]:
        """All properties, enriched when a header is present."""
        properties = await self._fetch(select(Property))
        return await self._enrich(properties, authorization)

    async def search_properties(
        self,
        filters: PropertySearch,
        authorization: str | None,
    ) -> list[PropertyWithOwner]:
        """
        Filter properties. Every filter is optional; given filters are AND-combined.

        ``location`` is a case-insensitive substring match; the price bounds are
        inclusive; the enum filters are exact.
        """
        query = select(Property)
        if filters.location:
            query = query.where(Property.location.ilike(f"%{filters.location}%"))
        if filters.min_price is not None:
            query = query.where(Property.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Property.price <= filters.max_price)
        if filters.property_type is not None:
            query = query.where(Property.property_type == filters.property_type)
        if filters.rental_type is not None:
            query = query.where(Property.rental_type == filters.rental_type)

        properties = await self._fetch(query)
        return await self._enrich(properties, authorization)

    async def get_property(
        self,
        property_id: int,
        authorization: str | None,
    ) -> PropertyWithOwner:
        """Single property, enriched when a header is present."""
        prop = await self.get_property_row(property_id)
        [item] = await self._enrich([prop], authorization)
        return item

    async def create_property(
        self,
        data: PropertyCreate,
        identity: IdentityClaim,
        authorization: str | None,
    ) -> PropertyWithOwner:
        """
        Create a property owned by the caller.

        The owner's profile is fetched before the insert, so a caller whose user
        record cannot be read never creates a listing.

        Raises:
            OwnerProfileUnavailableError: If the owner's profile cannot be fetched.

        Note:
            Does not commit. Caller (session generator) handles commit at request end.
        """
        try:
            owner = await self._profiles.fetch_user(identity.id, authorization)
        except ProfileFetchFailedError as e:
            raise OwnerProfileUnavailableError(identity.id) from e

        prop = Property(owner_id=identity.id, **data.model_dump())
        self._db.add(prop)
        await self._db.flush()
        await self._db.refresh(prop)
        logger.info("User %s created property %s", identity.id, prop.id)

        item = PropertyWithOwner.model_validate(prop)
        item.owner = owner
        return item

    async def update_property(
        self,
        property_id: int,
        data: PropertyUpdate,
        identity: IdentityClaim,
    ) -> Property:
        """
        Apply the fields present in ``data``. Owner or admin only.

        Raises:
            PropertyNotFoundError: If no property has this id.
            ForbiddenError: If the caller is neither the owner nor an admin.
        """
        prop = await self.get_property_row(property_id)
        ensure_owner_or_admin(identity, prop.owner_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(prop, field, value)

        await self._db.flush()
        await self._db.refresh(prop)
        return prop

    async def delete_property(self, property_id: int, identity: IdentityClaim) -> None:
        """
        Delete a property. Owner or admin only.

        Favorites pointing at it are left in place.
        """
        prop = await self.get_property_row(property_id)
        ensure_owner_or_admin(identity, prop.owner_id)
        await self._db.delete(prop)
        await self._db.flush()
        logger.info("User %s deleted property %s", identity.id, property_id)
