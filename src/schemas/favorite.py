"""Pydantic schemas for favorite endpoints."""
from datetime import datetime

from pydantic import Field

from schemas.common import CamelModel
from schemas.identity import UserProfile
from schemas.property import PropertyResponse


class FavoriteCreate(CamelModel):
    property_id: int = Field(..., ge=1)


class FavoriteUpdate(CamelModel):
    property_id: int = Field(..., ge=1)


class FavoriteResponse(CamelModel):
    """Stored favorite."""

    id: int
    user_id: int
    property_id: int
    created_at: datetime


class EnrichedFavorite(FavoriteResponse):
    """Favorite with the referenced property and the owning user's profile."""

    property: PropertyResponse
    user: UserProfile
