"""Enumerations stored in model columns and exposed on the wire."""
from enum import StrEnum


class Role(StrEnum):
    """User role. Stored and compared in lowercase."""

    USER = "user"
    ADMIN = "admin"


class RentalType(StrEnum):
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PropertyType(StrEnum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    STUDIO = "studio"
    COTTAGE = "cottage"
    TOWNHOUSE = "townhouse"
    LOFT = "loft"
