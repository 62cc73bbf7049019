"""FastAPI dependencies for injection."""
import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clients.profile_client import RemoteProfileClient
from core.auth import get_authorization_header, get_current_identity
from core.config import Settings, get_settings
from core.http_client import get_http_client
from db.session import get_async_session
from services.auth_service import AuthService
from services.enrichment import EnrichmentStrategy, create_enrichment_strategy
from services.favorite_service import FavoriteService
from services.property_service import PropertyService
from services.user_service import UserService


def get_profile_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> RemoteProfileClient:
    return RemoteProfileClient(
        http_client,
        base_url=settings.user_service_url,
        timeout=settings.http_timeout,
    )


def get_enrichment_strategy(
    settings: Settings = Depends(get_settings),
) -> EnrichmentStrategy:
    return create_enrichment_strategy(settings)


def get_auth_service(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


def get_user_service(db: AsyncSession = Depends(get_async_session)) -> UserService:
    return UserService(db)


def get_property_service(
    db: AsyncSession = Depends(get_async_session),
    profile_client: RemoteProfileClient = Depends(get_profile_client),
    enrichment: EnrichmentStrategy = Depends(get_enrichment_strategy),
) -> PropertyService:
    return PropertyService(db, profile_client, enrichment)


def get_favorite_service(
    db: AsyncSession = Depends(get_async_session),
    property_service: PropertyService = Depends(get_property_service),
    profile_client: RemoteProfileClient = Depends(get_profile_client),
) -> FavoriteService:
    return FavoriteService(db, property_service, profile_client)


__all__ = [
    "get_async_session",
    "get_auth_service",
    "get_authorization_header",
    "get_current_identity",
    "get_favorite_service",
    "get_property_service",
    "get_settings",
    "get_user_service",
]
