"""Identity and profile schemas passed between services."""
from datetime import datetime

from pydantic import ConfigDict, field_validator

from models.enums import Role
from schemas.common import CamelModel


class IdentityClaim(CamelModel):
    """
    Minimal identity produced by the auth service from a valid token.

    Lives for a single request and is never persisted by downstream services.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    email: str
    role: Role = Role.USER

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: object) -> object:
        """Accept 'ADMIN', 'Admin' and 'admin' as the same role."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserProfile(CamelModel):
    """Public profile of a user as returned by the user service."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    email: str
    role: Role = Role.USER
    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value
