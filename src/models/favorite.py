"""Favorite model linking a user to a property."""
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin


class Favorite(Base, CreatedAtMixin):
    """A property saved by a user. Each (user_id, property_id) pair appears once."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_favorites_user_property"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(index=True)
    property_id: Mapped[int] = mapped_column(index=True)
