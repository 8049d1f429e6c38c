"""Attendance-related Pydantic schemas."""

import uuid
from datetime import date as date_type
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.attendance import AttendanceStatus


class AttendanceRecordCreate(BaseModel):
    """Schema for recording one student's attendance."""

    model_config = ConfigDict(use_enum_values=True)

    student_id: uuid.UUID
    attendance_date: date_type = Field(default_factory=date_type.today)
    status: AttendanceStatus = Field(AttendanceStatus.PRESENT, validate_default=True)
    subject: str | None = Field(None, max_length=100)
    remarks: str | None = None


class AttendanceRecordUpdate(BaseModel):
    """Schema for correcting an attendance record."""

    model_config = ConfigDict(use_enum_values=True)

    status: AttendanceStatus | None = None
    remarks: str | None = None


class AttendanceRecordResponse(BaseModel):
    """An attendance record with the student's name joined in."""

    id: uuid.UUID
    student_id: uuid.UUID
    student_name: str | None = None
    roll_number: str | None = None
    class_name: str | None
    section: str | None
    subject: str | None
    attendance_date: date_type
    status: str
    remarks: str | None
    recorded_by: uuid.UUID | None
    created_at: datetime


class BulkAttendanceEntry(BaseModel):
    """One student's line on a class attendance sheet."""

    model_config = ConfigDict(use_enum_values=True)

    student_id: uuid.UUID
    status: AttendanceStatus
    remarks: str | None = None


class BulkAttendanceCreate(BaseModel):
    """A whole class's attendance for one day and subject."""

    class_name: str = Field(..., min_length=1, max_length=50)
    section: str | None = Field(None, max_length=20)
    subject: str | None = Field(None, max_length=100)
    date: date_type = Field(default_factory=date_type.today)
    records: list[BulkAttendanceEntry] = Field(..., min_length=1)


class BulkAttendanceResponse(BaseModel):
    """Outcome of saving an attendance sheet."""

    created_count: int
    updated_count: int


class AttendanceStats(BaseModel):
    """Attendance counts and rate over a period."""

    date_from: date_type
    date_to: date_type
    total_students: int
    total_records: int
    present_count: int
    absent_count: int
    late_count: int
    excused_count: int
    attendance_rate: float  # Percentage


class StudentAttendanceSummary(BaseModel):
    """A student's attendance over a period."""

    student_id: uuid.UUID
    student_name: str
    date_from: date_type
    date_to: date_type
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    excused_days: int
    attendance_rate: float


class StudentAttendanceOverview(BaseModel):
    """A student's attendance records with the period summary."""

    summary: StudentAttendanceSummary
    records: list[AttendanceRecordResponse]


class ClassSheetEntry(BaseModel):
    """A student on the class roster with the day's mark, if taken."""

    student_id: uuid.UUID
    student_name: str
    roll_number: str | None
    record_id: uuid.UUID | None = None
    status: str | None = None
    remarks: str | None = None


class ClassAttendanceSheet(BaseModel):
    """The roster of a class for one day, used to fill the attendance form."""

    class_name: str
    section: str | None
    subject: str | None
    date: date_type
    students: list[ClassSheetEntry]
    stats: AttendanceStats
