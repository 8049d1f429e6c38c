"""Authentication service for login and token management."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.config import settings
from schoolbase.exceptions import NotFoundException, UnauthorizedException, ValidationException
from schoolbase.models import School, User
from schoolbase.models.base import utcnow
from schoolbase.schemas.auth import LoginRequest, LoginResponse, UserProfile
from schoolbase.utils.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling authentication operations."""

    async def login(
        self, db: AsyncSession, request: LoginRequest
    ) -> tuple[LoginResponse, User]:
        """Authenticate a user and return tokens.

        Args:
            db: Database session
            request: Login request with email, password and optional school slug

        Returns:
            Tuple of (LoginResponse, User)

        Raises:
            UnauthorizedException: If credentials are invalid
            ValidationException: If the email exists at several schools and
                no school slug was given
        """
        # Find candidate accounts by email
        stmt = select(User).where(
            User.email == request.email.lower(),
            User.deleted_at.is_(None),
        )
        if request.school_slug:
            stmt = stmt.join(School, School.id == User.school_id).where(
                School.slug == request.school_slug
            )
        result = await db.execute(stmt)
        users = list(result.scalars().all())

        if not users:
            raise UnauthorizedException("Invalid email or password")
        if len(users) > 1:
            raise ValidationException(
                [{"field": "school_slug", "message": "School is required for this account"}],
                message="School is required for this account",
            )
        user = users[0]

        # Verify password
        if not verify_password(request.password, user.password_hash):
            logger.info(f"Failed login attempt for {request.email}")
            raise UnauthorizedException("Invalid email or password")

        # Check if account is active
        if not user.is_active:
            raise UnauthorizedException("Your account is inactive")

        if user.school_id:
            school = await db.get(School, user.school_id)
            if not school or school.deleted_at is not None or not school.is_active:
                raise UnauthorizedException("Your school account is inactive")

        # Update last login time
        user.last_login_at = utcnow()
        await db.flush()
        await db.refresh(user)

        logger.info(f"User {user.id} logged in (role={user.role})")

        return self._issue_tokens(user), user

    async def refresh_token(
        self, db: AsyncSession, refresh_token: str
    ) -> LoginResponse:
        """Refresh an access token using a refresh token.

        Raises:
            UnauthorizedException: If refresh token is invalid
        """
        # Decode and validate refresh token
        payload = decode_refresh_token(refresh_token)
        if not payload:
            raise UnauthorizedException("Invalid or expired refresh token")

        try:
            user_id = uuid.UUID(payload["sub"])
        except (KeyError, ValueError):
            raise UnauthorizedException("Invalid or expired refresh token")

        # Get user from database
        stmt = select(User).where(User.id == user_id, User.deleted_at.is_(None))
        result = await db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            raise UnauthorizedException("User not found")

        if not user.is_active:
            raise UnauthorizedException("Your account is inactive")

        return self._issue_tokens(user)

    async def get_current_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Get the current user by ID.

        Raises:
            NotFoundException: If user not found
        """
        stmt = select(User).where(User.id == user_id, User.deleted_at.is_(None))
        result = await db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundException("User")

        return user

    def _issue_tokens(self, user: User) -> LoginResponse:
        """Mint a fresh access/refresh token pair for a user."""
        access_token = create_access_token(
            user_id=user.id,
            school_id=user.school_id,
            role=user.role,
            name=user.full_name,
        )
        refresh_token = create_refresh_token(user_id=user.id)

        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=settings.jwt_access_token_expire_minutes * 60,
            user=UserProfile.model_validate(user),
        )


def get_auth_service() -> AuthService:
    """Get auth service instance."""
    return AuthService()
