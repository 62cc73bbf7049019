"""Property listing model."""
from sqlalchemy import Enum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin
from models.enums import PropertyType, RentalType


def _enum_column(enum_cls: type) -> Enum:
    return Enum(enum_cls, native_enum=False, values_callable=lambda e: [m.value for m in e])


class Property(Base, CreatedAtMixin):
    """
    A rental listing.

    owner_id references a user in the user service's store. There is no foreign
    key because the two tables live in different databases.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rental_type: Mapped[RentalType] = mapped_column(_enum_column(RentalType))
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    location: Mapped[str] = mapped_column(String(255))
    property_type: Mapped[PropertyType] = mapped_column(_enum_column(PropertyType))
