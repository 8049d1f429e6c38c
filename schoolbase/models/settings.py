"""Per-school and per-admin settings models."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import BaseModel


class SchoolSettings(BaseModel):
    """Settings row for a school (exactly one per school)."""

    __tablename__ = "school_settings"

    school_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Basic information
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    address_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # School details
    school_type: Mapped[str] = mapped_column(String(20), nullable=False, default="school")
    establishment_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    eiin: Mapped[str | None] = mapped_column(String(20), nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    principal_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    principal_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_bn: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Branding
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#3B82F6")
    secondary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#10B981")
    accent_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#F59E0B")
    motto: Mapped[str | None] = mapped_column(String(255), nullable=True)
    motto_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    use_watermark: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    use_letterhead: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # System preferences
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="Asia/Dhaka")
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="bn")
    date_format: Mapped[str] = mapped_column(String(20), nullable=False, default="DD/MM/YYYY")
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="BDT")
    academic_year_start: Mapped[str] = mapped_column(String(10), nullable=False, default="01/01")
    week_starts_on: Mapped[str] = mapped_column(String(10), nullable=False, default="sunday")
    enable_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_sms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enable_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_backup: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    data_retention: Mapped[int] = mapped_column(Integer, nullable=False, default=365)  # days

    # Limits
    max_students: Mapped[int] = mapped_column(Integer, nullable=False, default=500)
    max_teachers: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    allow_online_payments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class AdminSettings(BaseModel):
    """Profile and preference settings for one user."""

    __tablename__ = "admin_settings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Profile
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    emergency_contact: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Preferences
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="bn")
    dark_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sms_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    push_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Security
    two_factor_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    session_timeout: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    password_expiry: Mapped[int] = mapped_column(Integer, nullable=False, default=90)  # days
    allow_multiple_sessions: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Dashboard
    default_dashboard: Mapped[str] = mapped_column(String(50), nullable=False, default="overview")
    sidebar_collapsed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    show_welcome_message: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    items_per_page: Mapped[int] = mapped_column(Integer, nullable=False, default=25)
