"""
FastAPI application entry points.

Each service is its own ASGI app and runs in its own process:

- ``auth_app``: registration, login and token verification
- ``user_app``: user profiles
- ``property_app``: properties and favorites
- ``gateway_app``: ``/api/...`` reverse proxy in front of the three above
"""
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.error_handlers import register_error_handlers
from api.routers import auth, favorites, gateway, health, properties, users
from core.config import get_settings
from core.http_client import create_http_client
from core.logging import configure_logging
from db.session import create_tables, dispose_engine


def make_lifespan(
    with_database: bool,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build a lifespan that owns the shared HTTP client and, optionally, the engine."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Manage application lifespan - startup and shutdown."""
        app_settings = get_settings()

        # Startup: shared client for service-to-service calls
        app.state.http_client = create_http_client(app_settings)
        if with_database:
            await create_tables()

        yield

        # Shutdown: close pooled connections
        await app.state.http_client.aclose()
        if with_database:
            await dispose_engine()

    return lifespan


def create_app(
    title: str,
    description: str,
    routers: list[APIRouter],
    *,
    with_database: bool = True,
) -> FastAPI:
    """Create one service app with the shared middleware and error handlers."""
    app_settings = get_settings()

    app = FastAPI(
        title=title,
        description=description,
        version="0.1.0",
        lifespan=make_lifespan(with_database),
    )
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in routers:
        app.include_router(router)
    return app


configure_logging(get_settings().log_level)

auth_app = create_app(
    "Auth Service",
    "Registers users, issues tokens and verifies them for the other services.",
    [health.create_router("auth"), auth.router],
)

user_app = create_app(
    "User Service",
    "User profile CRUD. Every route requires a bearer token.",
    [health.create_router("users"), users.router],
)

property_app = create_app(
    "Property Service",
    "Property listings with search, and per-user favorites.",
    [health.create_router("properties"), properties.router, favorites.router],
)

gateway_app = create_app(
    "API Gateway",
    "Routes /api/auth, /api/users, /api/properties and /api/favorites to their services.",
    [gateway.router],
    with_database=False,
)
