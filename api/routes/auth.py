"""Registration, login and profile endpoints."""
from fastapi import APIRouter, Depends, status

from api.auth import get_current_user
from api.dependencies import get_user_service
from core.application.dtos import LoginRequest, RegisterRequest, TokenDTO, UserContext, UserDTO
from core.application.services import UserApplicationService


router = APIRouter()


@router.post(
    "/register",
    response_model=TokenDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Register a buyer or producer account",
)
async def register(
    request: RegisterRequest,
    service: UserApplicationService = Depends(get_user_service),
) -> TokenDTO:
    """
    Create an account and return an access token.

    Admin accounts cannot be self-registered.
    """
    return await service.register(request)


@router.post("/login", response_model=TokenDTO, summary="Exchange credentials for a token")
async def login(
    request: LoginRequest,
    service: UserApplicationService = Depends(get_user_service),
) -> TokenDTO:
    return await service.authenticate(request.email, request.password)


@router.get("/me", response_model=UserDTO, summary="Current user profile")
async def me(
    user: UserContext = Depends(get_current_user),
    service: UserApplicationService = Depends(get_user_service),
) -> UserDTO:
    return await service.get_profile(user)
