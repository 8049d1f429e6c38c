"""Pydantic schemas for Student entities."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolbase.models.student import Gender, StudentStatus


class StudentBase(BaseModel):
    """Base schema for student data."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=200)
    name_bn: str | None = Field(None, max_length=200)
    class_name: str | None = Field(None, max_length=50)
    section: str | None = Field(None, max_length=20)
    roll_number: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    gender: Gender | None = None
    blood_group: str | None = Field(None, max_length=5)
    father_name: str | None = Field(None, max_length=200)
    mother_name: str | None = Field(None, max_length=200)
    guardian_name: str | None = Field(None, max_length=200)
    guardian_phone: str | None = Field(None, max_length=50)
    guardian_relation: str | None = Field(None, max_length=50)
    present_address: str | None = None
    permanent_address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    photo_url: str | None = Field(None, max_length=500)


class StudentCreate(StudentBase):
    """Schema for creating a student."""

    student_code: str = Field(..., min_length=1, max_length=50)
    status: StudentStatus = Field(StudentStatus.ACTIVE, validate_default=True)
    admission_date: date | None = None


class StudentUpdate(BaseModel):
    """Schema for updating a student."""

    model_config = ConfigDict(use_enum_values=True)

    student_code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    name_bn: str | None = Field(None, max_length=200)
    class_name: str | None = Field(None, max_length=50)
    section: str | None = Field(None, max_length=20)
    roll_number: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    gender: Gender | None = None
    blood_group: str | None = Field(None, max_length=5)
    father_name: str | None = Field(None, max_length=200)
    mother_name: str | None = Field(None, max_length=200)
    guardian_name: str | None = Field(None, max_length=200)
    guardian_phone: str | None = Field(None, max_length=50)
    guardian_relation: str | None = Field(None, max_length=50)
    present_address: str | None = None
    permanent_address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    status: StudentStatus | None = None
    photo_url: str | None = Field(None, max_length=500)


class StudentResponse(StudentBase):
    """Schema for student response."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    school_id: uuid.UUID
    student_code: str
    gender: str | None = None
    email: str | None = None
    status: str
    admission_date: date
    age: int | None = None
    created_at: datetime
    updated_at: datetime


class ParentInfo(BaseModel):
    """Basic parent information."""

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None
    relationship_type: str
    is_primary: bool


class LinkParentRequest(BaseModel):
    """Request to link a parent to a student."""

    parent_id: uuid.UUID
    relationship_type: str = "PARENT"
    is_primary: bool = False
