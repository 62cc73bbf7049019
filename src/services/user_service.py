"""Service layer for user profile operations."""
import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import ensure_owner_or_admin
from models.user import User
from schemas.identity import IdentityClaim
from schemas.user import UserUpdate
from services.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class UserService:
    """Read and maintain user records. Every operation requires an authenticated caller."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_users(self) -> list[User]:
        result = await self._db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def find_user(self, username: str | None, email: str | None) -> User:
        """
        Look up one user by a single value matched against username or email.

        When both are given, ``username`` is used.

        Raises:
            BadRequestError: If neither value is given.
            UserNotFoundError: If no user matches.
        """
        value = username or email
        if not value:
            raise BadRequestError("Provide username or email")
        result = await self._db.execute(
            select(User).where(or_(User.username == value, User.email == value)).limit(1),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self._db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def _ensure_unique(self, user_id: int, field: str, value: str, label: str) -> None:
        column = getattr(User, field)
        result = await self._db.execute(
            select(User.id).where(column == value, User.id != user_id),
        )
        if result.first() is not None:
            raise ConflictError(f"{label} already taken")

    async def update_user(
        self,
        user_id: int,
        data: UserUpdate,
        identity: IdentityClaim,
    ) -> User:
        """
        Apply the fields present in ``data``. Self or admin only; role changes admin only.

        Raises:
            UserNotFoundError: If no user has this id.
            ForbiddenError: If the caller may not edit this user or its role.
            ConflictError: If the new username or email belongs to another user.

        Note:
            Does not commit. Caller (session generator) handles commit at request end.
        """
        user = await self.get_user(user_id)
        ensure_owner_or_admin(identity, user.id)

        update_data = data.model_dump(exclude_unset=True)
        if "role" in update_data and not identity.is_admin:
            logger.info("User %s attempted to change role of user %s", identity.id, user_id)
            raise ForbiddenError()
        if "username" in update_data:
            await self._ensure_unique(user_id, "username", update_data["username"], "Username")
        if "email" in update_data:
            await self._ensure_unique(user_id, "email", update_data["email"], "Email")

        for field, value in update_data.items():
            setattr(user, field, value)

        try:
            await self._db.flush()
        except IntegrityError as e:
            await self._db.rollback()
            raise UserAlreadyExistsError() from e
        await self._db.refresh(user)
        return user

    async def delete_user(self, user_id: int, identity: IdentityClaim) -> None:
        """
        Delete a user. Self or admin only.

        Properties and favorites owned by the user are left in place.
        """
        user = await self.get_user(user_id)
        ensure_owner_or_admin(identity, user.id)
        await self._db.delete(user)
        await self._db.flush()
        logger.info("User %s deleted user %s", identity.id, user_id)
