"""Pydantic schemas for schools."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SchoolAdminCreate(BaseModel):
    """First school admin created together with a school."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)


class SchoolBase(BaseModel):
    """Base schema for school data."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    website: str | None = Field(None, max_length=255)
    principal_name: str | None = Field(None, max_length=255)
    established_year: int | None = Field(None, ge=1800, le=2100)


class SchoolCreate(SchoolBase):
    """Schema for creating a school."""

    slug: str = Field(..., min_length=2, max_length=100, pattern=r"^[a-z0-9-]+$")
    admin: SchoolAdminCreate | None = None


class SchoolUpdate(BaseModel):
    """Schema for updating a school."""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    website: str | None = Field(None, max_length=255)
    principal_name: str | None = Field(None, max_length=255)
    established_year: int | None = Field(None, ge=1800, le=2100)
    is_active: bool | None = None


class SchoolResponse(SchoolBase):
    """Schema for school response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    email: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SchoolStats(BaseModel):
    """Headline counts for one school."""

    school_id: uuid.UUID
    total_users: int
    total_students: int
    total_teachers: int
    total_books: int
    total_inventory_items: int
