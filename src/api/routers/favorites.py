"""Favorite endpoints. Every route is scoped to the authenticated caller."""
from fastapi import APIRouter, Depends

from api.dependencies import (
    get_authorization_header,
    get_current_identity,
    get_favorite_service,
)
from schemas.common import MessageResponse
from schemas.favorite import EnrichedFavorite, FavoriteCreate, FavoriteUpdate
from schemas.identity import IdentityClaim
from services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=list[EnrichedFavorite])
async def list_favorites(
    identity: IdentityClaim = Depends(get_current_identity),
    authorization: str | None = Depends(get_authorization_header),
    service: FavoriteService = Depends(get_favorite_service),
) -> list[EnrichedFavorite]:
    """List the caller's favorites with their properties and user profile."""
    return await service.list_favorites(identity, authorization)


@router.get("/{favorite_id}", response_model=EnrichedFavorite)
async def get_favorite(
    favorite_id: int,
    identity: IdentityClaim = Depends(get_current_identity),
    authorization: str | None = Depends(get_authorization_header),
    service: FavoriteService = Depends(get_favorite_service),
) -> EnrichedFavorite:
    return await service.get_favorite(favorite_id, identity, authorization)


@router.post("", response_model=EnrichedFavorite, status_code=201)
async def add_favorite(
    data: FavoriteCreate,
    identity: IdentityClaim = Depends(get_current_identity),
    authorization: str | None = Depends(get_authorization_header),
    service: FavoriteService = Depends(get_favorite_service),
) -> EnrichedFavorite:
    """Save a property for the caller. Each property can be saved once."""
    return await service.add_favorite(data, identity, authorization)


@router.put("/{favorite_id}", response_model=EnrichedFavorite)
async def update_favorite(
    favorite_id: int,
    data: FavoriteUpdate,
    identity: IdentityClaim = Depends(get_current_identity),
    authorization: str | None = Depends(get_authorization_header),
    service: FavoriteService = Depends(get_favorite_service),
) -> EnrichedFavorite:
    """Point one of the caller's favorites at another property."""
    return await service.update_favorite(favorite_id, data, identity, authorization)


@router.delete("/{favorite_id}", response_model=MessageResponse)
async def remove_favorite(
    favorite_id: int,
    identity: IdentityClaim = Depends(get_current_identity),
    service: FavoriteService = Depends(get_favorite_service),
) -> MessageResponse:
    await service.remove_favorite(favorite_id, identity)
    return MessageResponse(message="Favorite removed successfully")
