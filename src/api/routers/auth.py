"""Registration, login and token verification endpoints."""
from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service, get_authorization_header
from clients.identity_client import TOKEN_NOT_PROVIDED, extract_bearer_token
from schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    VerifyResponse,
)
from services.auth_service import AuthService
from services.exceptions import UnauthenticatedError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create an account with the default role."""
    user = await service.register(data)
    return RegisterResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    return TokenResponse(token=await service.login(data))


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    authorization: str | None = Depends(get_authorization_header),
    service: AuthService = Depends(get_auth_service),
) -> VerifyResponse:
    """
    Resolve a bearer token to the identity of its user.

    Called by the other services on every protected request.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise UnauthenticatedError(TOKEN_NOT_PROVIDED)
    return VerifyResponse(user=await service.verify_token(token.strip()))


@router.get("/me", response_model=VerifyResponse)
async def me(
    authorization: str | None = Depends(get_authorization_header),
    service: AuthService = Depends(get_auth_service),
) -> VerifyResponse:
    """Identity of the caller, checked locally without a network hop."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise UnauthenticatedError("Authorization header missing or in wrong format")
    return VerifyResponse(user=await service.verify_token(token.strip()))
