"""User profile endpoints. Every route requires a bearer token."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_identity, get_user_service
from schemas.common import MessageResponse
from schemas.identity import IdentityClaim
from schemas.user import UserResponse, UserUpdate
from services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("", response_model=list[UserResponse])
async def list_users(
    service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List every user. Password hashes are never included."""
    users = await service.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get("/find", response_model=UserResponse)
async def find_user(
    username: str | None = Query(default=None),
    email: str | None = Query(default=None),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Find one user whose username or email equals the given value."""
    user = await service.find_user(username, email)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    identity: IdentityClaim = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Partially update a user. Self or admin; only admins may change roles."""
    user = await service.update_user(user_id, data, identity)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    identity: IdentityClaim = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await service.delete_user(user_id, identity)
    return MessageResponse(message="User deleted successfully")
