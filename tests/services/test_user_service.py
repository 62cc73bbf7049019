"""Tests for the user service layer."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.enums import Role
from models.user import User
from schemas.identity import IdentityClaim
from schemas.user import UserUpdate
from services.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    UserNotFoundError,
)
from services.user_service import UserService


@pytest.fixture
def service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


async def _user(db: AsyncSession, username: str, role: Role = Role.USER) -> User:
    user = User(
        username=username,
        email=f"{username}@x.com",
        password_hash="not-a-real-hash",
        role=role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def _claim(user: User) -> IdentityClaim:
    return IdentityClaim(id=user.id, email=user.email, role=user.role)


async def test__list_users__ordered(service: UserService, db_session: AsyncSession) -> None:
    await _user(db_session, "frank")
    await _user(db_session, "grace")

    users = await service.list_users()

    assert [u.username for u in users] == ["frank", "grace"]


@pytest.mark.parametrize(
    ("username", "email"),
    [("frank", None), (None, "frank@x.com"), ("frank@x.com", None), (None, "frank")],
)
async def test__find_user__value_matches_username_or_email(
    service: UserService,
    db_session: AsyncSession,
    username: str | None,
    email: str | None,
) -> None:
    """The given value is compared against both columns, whichever parameter carried it."""
    frank = await _user(db_session, "frank")

    found = await service.find_user(username, email)

    assert found.id == frank.id


async def test__find_user__requires_a_value(service: UserService) -> None:
    with pytest.raises(BadRequestError) as exc_info:
        await service.find_user(None, None)

    assert exc_info.value.message == "Provide username or email"
    assert exc_info.value.status_code == 400


async def test__find_user__absent(service: UserService) -> None:
    with pytest.raises(UserNotFoundError):
        await service.find_user("nobody", None)


async def test__get_user__absent(service: UserService) -> None:
    with pytest.raises(UserNotFoundError) as exc_info:
        await service.get_user(999)

    assert exc_info.value.message == "User not found"


async def test__update_user__self_partial(service: UserService, db_session: AsyncSession) -> None:
    frank = await _user(db_session, "frank")

    updated = await service.update_user(frank.id, UserUpdate(username="franky"), _claim(frank))

    assert updated.username == "franky"
    assert updated.email == "frank@x.com"
    assert updated.role == Role.USER


async def test__update_user__other_user_forbidden(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")
    grace = await _user(db_session, "grace")

    with pytest.raises(ForbiddenError):
        await service.update_user(frank.id, UserUpdate(username="hacked"), _claim(grace))


async def test__update_user__not_found_before_forbidden(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    grace = await _user(db_session, "grace")

    with pytest.raises(UserNotFoundError):
        await service.update_user(999, UserUpdate(username="x"), _claim(grace))


async def test__update_user__non_admin_cannot_change_own_role(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")

    with pytest.raises(ForbiddenError):
        await service.update_user(frank.id, UserUpdate(role="admin"), _claim(frank))


async def test__update_user__admin_changes_role(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")
    boss = await _user(db_session, "boss", role=Role.ADMIN)

    updated = await service.update_user(frank.id, UserUpdate(role="ADMIN"), _claim(boss))

    assert updated.role == Role.ADMIN


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"username": "grace"}, "Username already taken"),
        ({"email": "grace@x.com"}, "Email already taken"),
    ],
)
async def test__update_user__taken_username_or_email(
    service: UserService,
    db_session: AsyncSession,
    data: dict,
    message: str,
) -> None:
    frank = await _user(db_session, "frank")
    await _user(db_session, "grace")

    with pytest.raises(ConflictError) as exc_info:
        await service.update_user(frank.id, UserUpdate.model_validate(data), _claim(frank))

    assert exc_info.value.message == message


async def test__update_user__keeping_own_username_allowed(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")

    updated = await service.update_user(frank.id, UserUpdate(username="frank"), _claim(frank))

    assert updated.username == "frank"


async def test__delete_user__self_and_admin(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")
    grace = await _user(db_session, "grace")
    boss = await _user(db_session, "boss", role=Role.ADMIN)

    await service.delete_user(frank.id, _claim(frank))
    await service.delete_user(grace.id, _claim(boss))

    assert [u.username for u in await service.list_users()] == ["boss"]


async def test__delete_user__other_user_forbidden(
    service: UserService,
    db_session: AsyncSession,
) -> None:
    frank = await _user(db_session, "frank")
    grace = await _user(db_session, "grace")

    with pytest.raises(ForbiddenError):
        await service.delete_user(frank.id, _claim(grace))
