"""Pydantic schemas for property endpoints."""
from datetime import datetime

from pydantic import Field, field_validator

from models.enums import PropertyType, RentalType
from schemas.common import CamelModel
from schemas.identity import UserProfile


class PropertyCreate(CamelModel):
    """Schema for creating a property. The owner always comes from the caller's token."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    rental_type: RentalType
    price: float = Field(..., gt=0)
    location: str = Field(..., min_length=1, max_length=255)
    property_type: PropertyType


class PropertyUpdate(CamelModel):
    """
    Partial update for a property.

    Fields left out of the request body keep their stored value. ``ownerId`` is
    not accepted and is silently ignored if sent.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    rental_type: RentalType | None = None
    price: float | None = Field(default=None, gt=0)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    property_type: PropertyType | None = None

    @field_validator("title", "rental_type", "price", "location", "property_type")
    @classmethod
    def reject_null(cls, value: object) -> object:
        """Only description may be cleared; other columns are required."""
        if value is None:
            raise ValueError("cannot be null")
        return value


class PropertySearch(CamelModel):
    """Optional, AND-combined search filters."""

    location: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    property_type: PropertyType | None = None
    rental_type: RentalType | None = None


class PropertyResponse(CamelModel):
    """Stored property."""

    id: int
    owner_id: int
    title: str
    description: str | None
    rental_type: RentalType
    price: float
    location: str
    property_type: PropertyType
    created_at: datetime


class PropertyWithOwner(PropertyResponse):
    """
    Property enriched with its owner's profile.

    ``owner`` is left unset (and omitted from the response) when enrichment was
    skipped or failed.
    """

    owner: UserProfile | None = None
