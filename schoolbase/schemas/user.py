"""Pydantic schemas for user management and admin settings."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolbase.models.user import Role


class UserCreate(BaseModel):
    """Schema for creating a user within the current school."""

    model_config = ConfigDict(use_enum_values=True)

    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    role: Role
    student_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None


class UserStatusUpdate(BaseModel):
    """Activate or deactivate a user."""

    is_active: bool


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    school_id: uuid.UUID | None
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: str | None
    role: str
    is_active: bool
    student_id: uuid.UUID | None
    teacher_id: uuid.UUID | None
    last_login_at: datetime | None
    created_at: datetime


class AdminSettingsUpdate(BaseModel):
    """Partial update of the caller's admin settings."""

    display_name: str | None = Field(None, max_length=255)
    bio: str | None = None
    profile_picture: str | None = Field(None, max_length=500)
    contact_phone: str | None = Field(None, max_length=50)
    emergency_contact: str | None = Field(None, max_length=255)
    language: str | None = Field(None, pattern=r"^(bn|en|both)$")
    dark_mode: bool | None = None
    email_notifications: bool | None = None
    sms_notifications: bool | None = None
    push_notifications: bool | None = None
    two_factor_enabled: bool | None = None
    session_timeout: int | None = Field(None, ge=5, le=1440)
    password_expiry: int | None = Field(None, ge=0, le=365)
    allow_multiple_sessions: bool | None = None
    default_dashboard: str | None = Field(None, max_length=50)
    sidebar_collapsed: bool | None = None
    show_welcome_message: bool | None = None
    items_per_page: int | None = Field(None, ge=5, le=100)


class AdminSettingsResponse(BaseModel):
    """Admin settings of one user."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    display_name: str | None
    bio: str | None
    profile_picture: str | None
    contact_phone: str | None
    emergency_contact: str | None
    language: str
    dark_mode: bool
    email_notifications: bool
    sms_notifications: bool
    push_notifications: bool
    two_factor_enabled: bool
    session_timeout: int
    password_expiry: int
    allow_multiple_sessions: bool
    default_dashboard: str
    sidebar_collapsed: bool
    show_welcome_message: bool
    items_per_page: int
    updated_at: datetime
