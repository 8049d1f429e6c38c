"""Pydantic schemas for school settings.

Settings are edited either as a whole or one section at a time. Each section
schema lists the columns that section owns.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class BasicInfoSection(BaseModel):
    """Name and contact details."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    name_bn: str | None = Field(None, max_length=255)
    address: str | None = None
    address_bn: str | None = None
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    website: str | None = Field(None, max_length=255)


class DetailsSection(BaseModel):
    """Registration and leadership details."""

    model_config = ConfigDict(extra="forbid")

    school_type: str | None = Field(None, pattern=r"^(school|college|madrasha|nurani)$")
    establishment_year: int | None = Field(None, ge=1800, le=2100)
    eiin: str | None = Field(None, max_length=20)
    registration_number: str | None = Field(None, max_length=50)
    principal_name: str | None = Field(None, max_length=255)
    principal_phone: str | None = Field(None, max_length=50)
    description: str | None = None
    description_bn: str | None = None


class BrandingSection(BaseModel):
    """Colours, motto and letterhead options."""

    model_config = ConfigDict(extra="forbid")

    primary_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    secondary_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    accent_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    motto: str | None = Field(None, max_length=255)
    motto_bn: str | None = Field(None, max_length=255)
    use_watermark: bool | None = None
    use_letterhead: bool | None = None
    logo_url: str | None = Field(None, max_length=500)


class SystemSection(BaseModel):
    """Locale, feature switches and limits."""

    model_config = ConfigDict(extra="forbid")

    timezone: str | None = Field(None, max_length=50)
    language: str | None = Field(None, pattern=r"^(bn|en|both)$")
    date_format: str | None = Field(None, max_length=20)
    currency: str | None = Field(None, max_length=10)
    academic_year_start: str | None = Field(None, pattern=r"^\d{2}/\d{2}$")
    week_starts_on: str | None = Field(None, pattern=r"^(sunday|monday)$")
    enable_notifications: bool | None = None
    enable_sms: bool | None = None
    enable_email: bool | None = None
    auto_backup: bool | None = None
    data_retention: int | None = Field(None, ge=30)
    max_students: int | None = Field(None, ge=1)
    max_teachers: int | None = Field(None, ge=1)
    allow_online_payments: bool | None = None


SETTINGS_SECTIONS: dict[str, type[BaseModel]] = {
    "basic": BasicInfoSection,
    "details": DetailsSection,
    "branding": BrandingSection,
    "system": SystemSection,
}


class SchoolSettingsUpdate(BasicInfoSection, DetailsSection, BrandingSection, SystemSection):
    """Every settings field at once."""


class SchoolSettingsResponse(BaseModel):
    """Full settings row."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    school_id: uuid.UUID
    name: str
    name_bn: str | None
    address: str | None
    address_bn: str | None
    email: str | None
    phone: str | None
    website: str | None
    school_type: str
    establishment_year: int | None
    eiin: str | None
    registration_number: str | None
    principal_name: str | None
    principal_phone: str | None
    description: str | None
    description_bn: str | None
    primary_color: str
    secondary_color: str
    accent_color: str
    motto: str | None
    motto_bn: str | None
    use_watermark: bool
    use_letterhead: bool
    logo_url: str | None
    timezone: str
    language: str
    date_format: str
    currency: str
    academic_year_start: str
    week_starts_on: str
    enable_notifications: bool
    enable_sms: bool
    enable_email: bool
    auto_backup: bool
    data_retention: int
    max_students: int
    max_teachers: int
    allow_online_payments: bool
    updated_at: datetime
