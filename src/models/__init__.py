"""SQLAlchemy models."""
from models.base import Base, CreatedAtMixin
from models.enums import PropertyType, RentalType, Role
from models.favorite import Favorite
from models.property import Property
from models.user import User

__all__ = [
    "Base",
    "CreatedAtMixin",
    "Favorite",
    "Property",
    "PropertyType",
    "RentalType",
    "Role",
    "User",
]
