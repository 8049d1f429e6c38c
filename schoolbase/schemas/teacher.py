"""Pydantic schemas for Teacher entities."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolbase.models.student import Gender


class TeacherBase(BaseModel):
    """Base schema for teacher data."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=200)
    name_bn: str | None = Field(None, max_length=200)
    qualification: str | None = Field(None, max_length=255)
    subject: str | None = Field(None, max_length=100)
    designation: str | None = Field(None, max_length=100)
    date_of_birth: date | None = None
    gender: Gender | None = None
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    photo_url: str | None = Field(None, max_length=500)
    joining_date: date | None = None


class TeacherCreate(TeacherBase):
    """Schema for creating a teacher."""

    teacher_code: str = Field(..., min_length=1, max_length=50)
    status: str = Field("active", pattern=r"^(active|inactive|on_leave|resigned)$")


class TeacherUpdate(BaseModel):
    """Schema for updating a teacher."""

    model_config = ConfigDict(use_enum_values=True)

    teacher_code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    name_bn: str | None = Field(None, max_length=200)
    qualification: str | None = Field(None, max_length=255)
    subject: str | None = Field(None, max_length=100)
    designation: str | None = Field(None, max_length=100)
    date_of_birth: date | None = None
    gender: Gender | None = None
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    status: str | None = Field(None, pattern=r"^(active|inactive|on_leave|resigned)$")
    photo_url: str | None = Field(None, max_length=500)
    joining_date: date | None = None


class TeacherResponse(TeacherBase):
    """Schema for teacher response."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    school_id: uuid.UUID
    teacher_code: str
    gender: str | None = None
    email: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
