"""Pydantic schemas for the auth service endpoints."""
from pydantic import BaseModel, EmailStr, Field, field_validator

from models.enums import Role
from schemas.common import CamelModel
from schemas.identity import IdentityClaim
from services.passwords import MAX_PASSWORD_BYTES


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Schema for exchanging credentials for a token."""

    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterResponse(CamelModel):
    """Registered user, without credentials."""

    id: int
    username: str
    email: str
    role: Role


class TokenResponse(BaseModel):
    """Signed bearer token returned by login."""

    token: str


class VerifyResponse(BaseModel):
    """Identity resolved from a bearer token."""

    user: IdentityClaim
