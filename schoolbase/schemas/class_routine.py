"""Pydantic schemas for class routines."""

import uuid
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schoolbase.models.class_routine import (
    LanguageOption,
    Orientation,
    PaperSize,
    PeriodType,
    RoutineStatus,
    RoutineTemplate,
    WeekStructure,
)


class RoutinePeriodCreate(BaseModel):
    """One slot of the weekly grid. Day 0 is Saturday."""

    model_config = ConfigDict(use_enum_values=True)

    day_of_week: int = Field(..., ge=0, le=6)
    period_number: int = Field(..., ge=1)
    start_time: time
    end_time: time
    subject: str = Field(..., min_length=1, max_length=100)
    subject_bn: str | None = Field(None, max_length=100)
    teacher_id: uuid.UUID | None = None
    teacher_name: str | None = Field(None, max_length=200)
    room_number: str | None = Field(None, max_length=50)
    period_type: PeriodType = Field(PeriodType.REGULAR, validate_default=True)
    background_color: str | None = Field(None, max_length=20)
    text_color: str | None = Field(None, max_length=20)

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class RoutinePeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    day_of_week: int
    period_number: int
    start_time: time
    end_time: time
    subject: str
    subject_bn: str | None
    teacher_id: uuid.UUID | None
    teacher_name: str | None
    room_number: str | None
    period_type: str
    background_color: str | None
    text_color: str | None


class ClassRoutineCreate(BaseModel):
    """Schema for creating a routine, optionally with its periods."""

    model_config = ConfigDict(use_enum_values=True)

    class_name: str = Field(..., min_length=1, max_length=50)
    section: str = Field(..., min_length=1, max_length=20)
    academic_year: str = Field(..., min_length=1, max_length=20)
    semester: str | None = Field(None, max_length=50)
    institute_name: str = Field(..., min_length=1, max_length=255)
    institute_address: str | None = None
    class_teacher: str = Field(..., min_length=1, max_length=200)
    total_students: int | None = Field(None, ge=0)
    effective_date: date
    week_structure: WeekStructure = Field(WeekStructure.SIX_DAY, validate_default=True)
    periods_per_day: int = Field(7, ge=5, le=10)
    period_duration: int = Field(45, ge=30, le=60)
    start_time: time = time(8, 0)
    include_breaks: bool = True
    prayer_breaks: list[Any] = Field(default_factory=list)
    template: RoutineTemplate = Field(RoutineTemplate.STANDARD, validate_default=True)
    color_coding: bool = True
    show_teacher_names: bool = True
    show_room_numbers: bool = False
    language_option: LanguageOption = Field(LanguageOption.BILINGUAL, validate_default=True)
    paper_size: PaperSize = Field(PaperSize.A4, validate_default=True)
    orientation: Orientation = Field(Orientation.LANDSCAPE, validate_default=True)
    status: RoutineStatus = Field(RoutineStatus.ACTIVE, validate_default=True)
    periods: list[RoutinePeriodCreate] = Field(default_factory=list)


class ClassRoutineUpdate(BaseModel):
    """Schema for updating a routine.

    When ``periods`` is sent it replaces the whole grid.
    """

    model_config = ConfigDict(use_enum_values=True)

    class_name: str | None = Field(None, min_length=1, max_length=50)
    section: str | None = Field(None, min_length=1, max_length=20)
    academic_year: str | None = Field(None, min_length=1, max_length=20)
    semester: str | None = Field(None, max_length=50)
    institute_name: str | None = Field(None, min_length=1, max_length=255)
    institute_address: str | None = None
    class_teacher: str | None = Field(None, min_length=1, max_length=200)
    total_students: int | None = Field(None, ge=0)
    effective_date: date | None = None
    week_structure: WeekStructure | None = None
    periods_per_day: int | None = Field(None, ge=5, le=10)
    period_duration: int | None = Field(None, ge=30, le=60)
    start_time: time | None = None
    include_breaks: bool | None = None
    prayer_breaks: list[Any] | None = None
    template: RoutineTemplate | None = None
    color_coding: bool | None = None
    show_teacher_names: bool | None = None
    show_room_numbers: bool | None = None
    language_option: LanguageOption | None = None
    paper_size: PaperSize | None = None
    orientation: Orientation | None = None
    status: RoutineStatus | None = None
    periods: list[RoutinePeriodCreate] | None = None


class ClassRoutineResponse(BaseModel):
    """Routine header as shown in lists."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    class_name: str
    section: str
    academic_year: str
    semester: str | None
    institute_name: str
    institute_address: str | None
    class_teacher: str
    total_students: int | None
    effective_date: date
    week_structure: str
    periods_per_day: int
    period_duration: int
    start_time: time
    include_breaks: bool
    prayer_breaks: list[Any]
    template: str
    color_coding: bool
    show_teacher_names: bool
    show_room_numbers: bool
    language_option: str
    paper_size: str
    orientation: str
    status: str
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class ClassRoutineDetail(ClassRoutineResponse):
    """Routine with its periods, ordered by day then period."""

    periods: list[RoutinePeriodResponse] = []


class RoutineStats(BaseModel):
    total: int
    active: int
    draft: int
    archived: int


class TimeSlot(BaseModel):
    """A generated slot; ``period`` is None for the break."""

    period: int | None
    is_break: bool = False
    start_time: str  # HH:MM
    end_time: str
    label: str
    label_bn: str


class RoutineTeacher(BaseModel):
    """Teacher choice for filling in routine periods."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    name_bn: str | None
    subject: str | None
    designation: str | None
