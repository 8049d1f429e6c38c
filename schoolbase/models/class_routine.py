"""Class routine (weekly timetable) models."""

import uuid
from datetime import date, time
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import BaseModel, JSONType, SchoolScopedModel


class RoutineStatus(str, Enum):
    """Publication state of a routine."""

    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class WeekStructure(str, Enum):
    """School days per week."""

    FIVE_DAY = "5-day"
    SIX_DAY = "6-day"


class RoutineTemplate(str, Enum):
    """Print layouts for a routine."""

    STANDARD = "standard"
    COMPACT = "compact"
    DETAILED = "detailed"
    WALL = "wall"


class LanguageOption(str, Enum):
    ENGLISH = "english"
    BENGALI = "bengali"
    BILINGUAL = "bilingual"


class PaperSize(str, Enum):
    A4 = "A4"
    A3 = "A3"
    LETTER = "Letter"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class PeriodType(str, Enum):
    """Kinds of slot in a routine."""

    REGULAR = "regular"
    BREAK = "break"
    PRAYER = "prayer"
    LUNCH = "lunch"


class ClassRoutine(SchoolScopedModel):
    """Weekly timetable of one class and section, with its print settings."""

    __tablename__ = "class_routines"
    __table_args__ = (
        Index(
            "idx_class_routines_school_class",
            "school_id",
            "class_name",
            "section",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    class_name: Mapped[str] = mapped_column(String(50), nullable=False)
    section: Mapped[str] = mapped_column(String(20), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[str | None] = mapped_column(String(50), nullable=True)
    institute_name: Mapped[str] = mapped_column(String(255), nullable=False)
    institute_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    class_teacher: Mapped[str] = mapped_column(String(200), nullable=False)
    total_students: Mapped[int | None] = mapped_column(Integer, nullable=True)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    week_structure: Mapped[str] = mapped_column(
        String(10), nullable=False, default=WeekStructure.SIX_DAY.value
    )
    periods_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    period_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=45)  # minutes
    start_time: Mapped[time] = mapped_column(Time, nullable=False, default=time(8, 0))
    include_breaks: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    prayer_breaks: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    template: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RoutineTemplate.STANDARD.value
    )
    color_coding: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_teacher_names: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_room_numbers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    language_option: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LanguageOption.BILINGUAL.value
    )
    paper_size: Mapped[str] = mapped_column(String(10), nullable=False, default=PaperSize.A4.value)
    orientation: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Orientation.LANDSCAPE.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RoutineStatus.ACTIVE.value
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


class RoutinePeriod(BaseModel):
    """One slot of a routine; lives and dies with its routine."""

    __tablename__ = "routine_periods"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_routine_periods_day"),
        CheckConstraint("end_time > start_time", name="ck_routine_periods_times"),
        Index("idx_routine_periods_routine", "routine_id", "day_of_week", "period_number"),
    )

    routine_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("class_routines.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0 = Saturday
    period_number: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    subject_bn: Mapped[str | None] = mapped_column(String(100), nullable=True)
    teacher_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
    )
    teacher_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    room_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    period_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PeriodType.REGULAR.value
    )
    background_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    text_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
