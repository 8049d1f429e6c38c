"""Academic calendar models: years and terms."""

import uuid
from datetime import date
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class AcademicYearStatus(str, Enum):
    """Lifecycle of an academic year."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TermStatus(str, Enum):
    """Lifecycle of an academic term."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class AcademicYear(SchoolScopedModel):
    """An academic year (session) for a school."""

    __tablename__ = "academic_years"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_academic_years_dates"),
        # Only one current year per school
        Index(
            "idx_academic_years_current",
            "school_id",
            unique=True,
            postgresql_where=text("is_current AND deleted_at IS NULL"),
            sqlite_where=text("is_current AND deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AcademicYearStatus.DRAFT.value
    )


class AcademicTerm(SchoolScopedModel):
    """A term within an academic year."""

    __tablename__ = "academic_terms"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_academic_terms_dates"),
        Index("idx_academic_terms_year", "academic_year_id"),
    )

    academic_year_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("academic_years.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    exam_scheduled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    result_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TermStatus.UPCOMING.value
    )
