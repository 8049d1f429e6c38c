"""Pydantic schemas for academic years and terms."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.academic import AcademicYearStatus, TermStatus
from schoolbase.schemas.common import DateRangeMixin


class AcademicYearCreate(DateRangeMixin):
    """Schema for creating an academic year."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=100)
    name_bn: str | None = Field(None, max_length=100)
    start_date: date
    end_date: date
    description: str | None = None
    status: AcademicYearStatus = Field(AcademicYearStatus.DRAFT, validate_default=True)


class AcademicYearUpdate(BaseModel):
    """Schema for updating an academic year."""

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    name_bn: str | None = Field(None, max_length=100)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None
    is_active: bool | None = None


class AcademicYearStatusUpdate(BaseModel):
    """Change the lifecycle status of a year."""

    model_config = ConfigDict(use_enum_values=True)

    status: AcademicYearStatus


class AcademicYearResponse(BaseModel):
    """Schema for academic year response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    name_bn: str | None
    start_date: date
    end_date: date
    is_active: bool
    is_current: bool
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime


class AcademicYearStats(BaseModel):
    """Counts of academic years and terms."""

    total_years: int
    active_years: int
    completed_years: int
    total_terms: int
    current_year: AcademicYearResponse | None = None


class AcademicTermCreate(DateRangeMixin):
    """Schema for creating a term."""

    model_config = ConfigDict(use_enum_values=True)

    academic_year_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=100)
    name_bn: str | None = Field(None, max_length=100)
    start_date: date
    end_date: date
    is_active: bool = True
    exam_scheduled: bool = False
    result_published: bool = False
    status: TermStatus = Field(TermStatus.UPCOMING, validate_default=True)


class AcademicTermUpdate(BaseModel):
    """Schema for updating a term."""

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    name_bn: str | None = Field(None, max_length=100)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None
    exam_scheduled: bool | None = None
    result_published: bool | None = None
    status: TermStatus | None = None


class AcademicTermResponse(BaseModel):
    """Schema for term response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    academic_year_id: uuid.UUID
    name: str
    name_bn: str | None
    start_date: date
    end_date: date
    is_active: bool
    exam_scheduled: bool
    result_published: bool
    status: str
    created_at: datetime
    updated_at: datetime
