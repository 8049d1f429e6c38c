"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.config import settings
from schoolbase.database import get_db
from schoolbase.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    UserProfile,
)
from schoolbase.schemas.common import APIResponse
from schoolbase.services.auth_service import get_auth_service
from schoolbase.utils.permissions import require_authenticated
from schoolbase.utils.school_context import get_current_user_id

router = APIRouter()


def _set_auth_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_access_token_expire_minutes * 60,
    )


@router.post("/login", response_model=APIResponse[LoginResponse])
async def login(
    request: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return tokens.

    Sets an HttpOnly cookie for the browser client in addition to returning
    tokens in the response body for API clients.
    """
    auth_service = get_auth_service()
    login_response, user = await auth_service.login(db, request)
    await db.commit()

    _set_auth_cookie(response, login_response.access_token)

    return APIResponse(
        data=login_response,
        message=f"Welcome back, {user.first_name}!",
    )


@router.post("/refresh", response_model=APIResponse[LoginResponse])
async def refresh_token(
    request: RefreshTokenRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Refresh access token using refresh token."""
    auth_service = get_auth_service()
    login_response = await auth_service.refresh_token(db, request.refresh_token)

    _set_auth_cookie(response, login_response.access_token)

    return APIResponse(data=login_response)


@router.post("/logout", response_model=APIResponse[None])
async def logout(response: Response):
    """Clear the authentication cookie.

    Tokens stay valid until they expire.
    """
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return APIResponse(message="Logged out successfully")


@router.get("/me", response_model=APIResponse[UserProfile])
@require_authenticated()
async def get_me(db: AsyncSession = Depends(get_db)):
    """Get current user profile."""
    auth_service = get_auth_service()
    user = await auth_service.get_current_user(db, get_current_user_id())

    return APIResponse(data=UserProfile.model_validate(user))
