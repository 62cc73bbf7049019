"""Tests for the auth service layer."""
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.enums import Role
from models.user import User
from schemas.auth import LoginRequest, RegisterRequest
from services.auth_service import AuthService
from services.exceptions import UnauthenticatedError, UserAlreadyExistsError


@pytest.fixture
def auth_service(db_session: AsyncSession, settings: Settings) -> AuthService:
    return AuthService(db_session, settings)


async def _register(service: AuthService, username: str = "erin") -> User:
    return await service.register(
        RegisterRequest(username=username, email=f"{username}@x.com", password="secret1"),
    )


async def test__register__stores_hashed_password_and_default_role(
    auth_service: AuthService,
    db_session: AsyncSession,
) -> None:
    user = await _register(auth_service)

    stored = await db_session.scalar(select(User).where(User.id == user.id))
    assert stored is not None
    assert stored.role == Role.USER
    assert stored.password_hash != "secret1"
    assert stored.created_at is not None


@pytest.mark.parametrize(
    ("username", "email"),
    [("erin", "other@x.com"), ("other", "erin@x.com")],
)
async def test__register__duplicate_email_or_username_rejected(
    auth_service: AuthService,
    username: str,
    email: str,
) -> None:
    await _register(auth_service)

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        await auth_service.register(
            RegisterRequest(username=username, email=email, password="secret1"),
        )

    assert exc_info.value.message == "User already exists"


async def test__login__returns_token_that_verifies(auth_service: AuthService) -> None:
    user = await _register(auth_service)

    token = await auth_service.login(LoginRequest(email="erin@x.com", password="secret1"))
    claim = await auth_service.verify_token(token)

    assert claim.id == user.id
    assert claim.email == "erin@x.com"
    assert claim.role == Role.USER


@pytest.mark.parametrize(
    ("email", "password"),
    [("erin@x.com", "wrong-password"), ("nobody@x.com", "secret1")],
)
async def test__login__invalid_credentials(
    auth_service: AuthService,
    email: str,
    password: str,
) -> None:
    """Unknown email and wrong password produce the same error."""
    await _register(auth_service)

    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth_service.login(LoginRequest(email=email, password=password))

    assert exc_info.value.message == "Invalid credentials"


async def test__verify_token__role_read_from_store(
    auth_service: AuthService,
    db_session: AsyncSession,
) -> None:
    """A promotion takes effect without logging in again."""
    user = await _register(auth_service)
    token = await auth_service.login(LoginRequest(email="erin@x.com", password="secret1"))

    user.role = Role.ADMIN
    await db_session.flush()

    claim = await auth_service.verify_token(token)
    assert claim.is_admin


async def test__verify_token__deleted_user_rejected(
    auth_service: AuthService,
    db_session: AsyncSession,
) -> None:
    user = await _register(auth_service)
    token = await auth_service.login(LoginRequest(email="erin@x.com", password="secret1"))

    await db_session.delete(user)
    await db_session.flush()

    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth_service.verify_token(token)

    assert exc_info.value.message == "User not found"
