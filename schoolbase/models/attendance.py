"""Attendance tracking model."""

import uuid
from datetime import date
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class AttendanceStatus(str, Enum):
    """Attendance status options."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class AttendanceRecord(SchoolScopedModel):
    """A student's attendance for one day, optionally for one subject."""

    __tablename__ = "attendance_records"
    __table_args__ = (
        Index(
            "idx_attendance_school_date",
            "school_id",
            "attendance_date",
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_attendance_student_date", "student_id", "attendance_date"),
        Index("idx_attendance_class_date", "school_id", "class_name", "section", "attendance_date"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    class_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    section: Mapped[str | None] = mapped_column(String(20), nullable=True)
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AttendanceStatus.PRESENT.value
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_present(self) -> bool:
        """Late counts as present."""
        return self.status in (AttendanceStatus.PRESENT.value, AttendanceStatus.LATE.value)
