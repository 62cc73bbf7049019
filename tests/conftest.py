"""
Pytest fixtures for testing.

The four services run in-process. Service-to-service calls go through one
shared httpx client whose transports are mounted onto the auth, user and
property apps, so a property request really calls ``/auth/verify`` and
``/users/{id}`` on the other apps. The auth and user services share one
in-memory database; the property service has its own.
"""
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.config import Settings, get_settings
from core.http_client import get_http_client
from db.session import get_async_session
from models import Base, Role, User

AUTH_URL = "http://auth.test"
USERS_URL = "http://users.test"
PROPERTIES_URL = "http://properties.test"

PASSWORD = "pw123456"


@dataclass
class RegisteredUser:
    """A user created through the auth service, with a valid bearer token."""

    id: int
    username: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


async def _create_engine() -> AsyncEngine:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


def _session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing every service URL at the in-process apps."""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        JWT_SECRET="test-secret",
        JWT_EXPIRES_IN=3600,
        AUTH_SERVICE_URL=AUTH_URL,
        USER_SERVICE_URL=USERS_URL,
        PROPERTY_SERVICE_URL=PROPERTIES_URL,
        HTTP_TIMEOUT=5.0,
        ENRICHMENT_STRATEGY="sequential",
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Engine for the auth and user services' shared database."""
    engine = await _create_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def property_engine() -> AsyncGenerator[AsyncEngine]:
    """Engine for the property service's database."""
    engine = await _create_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for service-level tests that do not go through HTTP."""
    async with _session_factory(async_engine)() as session:
        yield session


def _override(
    app: FastAPI,
    engine: AsyncEngine,
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> None:
    factory = _session_factory(engine)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: http_client


@pytest.fixture
async def service_http_client() -> AsyncGenerator[httpx.AsyncClient]:
    """The client the apps use to call each other."""
    from api.main import auth_app, property_app, user_app

    async with httpx.AsyncClient(
        mounts={
            AUTH_URL: ASGITransport(app=auth_app),
            USERS_URL: ASGITransport(app=user_app),
            PROPERTIES_URL: ASGITransport(app=property_app),
        },
    ) as client:
        yield client


@pytest.fixture
async def apps(
    settings: Settings,
    async_engine: AsyncEngine,
    property_engine: AsyncEngine,
    service_http_client: httpx.AsyncClient,
) -> AsyncGenerator[dict[str, FastAPI]]:
    """All four apps with database, settings and HTTP client overridden."""
    from api.main import auth_app, gateway_app, property_app, user_app

    _override(auth_app, async_engine, settings, service_http_client)
    _override(user_app, async_engine, settings, service_http_client)
    _override(property_app, property_engine, settings, service_http_client)
    _override(gateway_app, async_engine, settings, service_http_client)

    yield {
        "auth": auth_app,
        "users": user_app,
        "properties": property_app,
        "gateway": gateway_app,
    }

    for app in (auth_app, user_app, property_app, gateway_app):
        app.dependency_overrides.clear()


async def _client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


@pytest.fixture
async def auth_client(apps: dict[str, FastAPI]) -> AsyncGenerator[AsyncClient]:
    async for client in _client(apps["auth"]):
        yield client


@pytest.fixture
async def user_client(apps: dict[str, FastAPI]) -> AsyncGenerator[AsyncClient]:
    async for client in _client(apps["users"]):
        yield client


@pytest.fixture
async def property_client(apps: dict[str, FastAPI]) -> AsyncGenerator[AsyncClient]:
    async for client in _client(apps["properties"]):
        yield client


@pytest.fixture
async def gateway_client(apps: dict[str, FastAPI]) -> AsyncGenerator[AsyncClient]:
    async for client in _client(apps["gateway"]):
        yield client


@pytest.fixture
def register_user(
    auth_client: AsyncClient,
) -> Callable[..., Awaitable[RegisteredUser]]:
    """Register and log in a user through the auth service."""

    async def _register(username: str, email: str | None = None) -> RegisteredUser:
        email = email or f"{username}@example.com"
        response = await auth_client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": PASSWORD},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]

        response = await auth_client.post(
            "/auth/login", json={"email": email, "password": PASSWORD},
        )
        assert response.status_code == 200, response.text
        return RegisteredUser(
            id=user_id, username=username, email=email, token=response.json()["token"],
        )

    return _register


@pytest.fixture
def make_admin(async_engine: AsyncEngine) -> Callable[[int], Awaitable[None]]:
    """Promote a user directly in the store. Takes effect on the next verify call."""

    async def _make_admin(user_id: int) -> None:
        async with _session_factory(async_engine)() as session:
            await session.execute(update(User).where(User.id == user_id).values(role=Role.ADMIN))
            await session.commit()

    return _make_admin


@pytest.fixture
async def alice(register_user: Callable[..., Awaitable[RegisteredUser]]) -> RegisteredUser:
    return await register_user("alice", "alice@x.com")


@pytest.fixture
async def bob(register_user: Callable[..., Awaitable[RegisteredUser]]) -> RegisteredUser:
    return await register_user("bob", "bob@x.com")
