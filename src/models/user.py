"""User model shared by the auth and user services."""
from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin
from models.enums import Role


class User(Base, CreatedAtMixin):
    """User credentials and profile. The password hash never leaves the auth service."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
        server_default=Role.USER.value,
    )
