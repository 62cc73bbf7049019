"""Pydantic schemas for the user service endpoints."""
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from models.enums import Role
from schemas.common import CamelModel


class UserResponse(CamelModel):
    """User record as exposed by the user service. Never includes the password hash."""

    id: int
    username: str
    email: str
    role: Role
    created_at: datetime


class UserUpdate(CamelModel):
    """
    Partial update for a user.

    Only fields present in the request body are applied. Changing ``role``
    additionally requires an admin caller.
    """

    username: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    role: Role | None = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("username", "email", "role")
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("cannot be null")
        return value
