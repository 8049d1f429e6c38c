"""Authentication-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Login request schema.

    ``school_slug`` is only needed when the same email is registered at more
    than one school.
    """

    email: EmailStr
    password: str = Field(..., min_length=1)
    school_slug: str | None = None


class LoginResponse(BaseModel):
    """Login response with tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until token expires
    user: "UserProfile"


class RefreshTokenRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str


class UserProfile(BaseModel):
    """Current user profile schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    school_id: uuid.UUID | None
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: str | None
    role: str
    student_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None
    last_login_at: datetime | None
    created_at: datetime


LoginResponse.model_rebuild()
