"""Service layer for the auth service: registration, login and token verification."""
import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.user import User
from schemas.auth import LoginRequest, RegisterRequest
from schemas.identity import IdentityClaim
from services import token_service
from services.exceptions import UnauthenticatedError, UserAlreadyExistsError
from services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """
    Owns the credential store and is the only issuer and verifier of tokens.

    Other services never decode tokens themselves; they call ``GET /auth/verify``
    which ends up in :meth:`verify_token`.
    """

    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self._db = db
        self._settings = settings

    async def register(self, data: RegisterRequest) -> User:
        """
        Create a user with the default role.

        Raises:
            UserAlreadyExistsError: If the email or username is taken.

        Note:
            Does not commit. Caller (session generator) handles commit at request end.
        """
        result = await self._db.execute(
            select(User.id).where(
                or_(User.email == data.email, User.username == data.username),
            ),
        )
        if result.first() is not None:
            raise UserAlreadyExistsError()

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        self._db.add(user)
        try:
            await self._db.flush()
        except IntegrityError as e:
            # Concurrent registration won the unique constraint
            await self._db.rollback()
            raise UserAlreadyExistsError() from e
        await self._db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    async def login(self, data: LoginRequest) -> str:
        """
        Exchange credentials for a signed token.

        Raises:
            UnauthenticatedError: "Invalid credentials" for unknown email or wrong password.
        """
        result = await self._db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthenticatedError("Invalid credentials")
        return token_service.generate_token(user, self._settings)

    async def verify_token(self, token: str) -> IdentityClaim:
        """
        Resolve a token to the identity claim of a user that still exists.

        The role is read from the store rather than the token, so a role change
        takes effect without re-login.

        Raises:
            UnauthenticatedError: If the token is invalid or expired, or the user is gone.
        """
        payload = token_service.decode_token(token, self._settings)
        user = await self._db.get(User, payload["id"])
        if user is None:
            raise UnauthenticatedError("User not found")
        return IdentityClaim(id=user.id, email=user.email, role=user.role)
