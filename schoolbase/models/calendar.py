"""Calendar event model."""

import uuid
from datetime import date, time
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    Time,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import JSONType, SchoolScopedModel


class EventType(str, Enum):
    """Calendar event types."""

    EVENT = "event"
    HOLIDAY = "holiday"
    EXAM = "exam"
    MEETING = "meeting"


class CalendarEvent(SchoolScopedModel):
    """An event, holiday, exam or meeting on the school calendar."""

    __tablename__ = "calendar_events"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_calendar_events_dates"),
        Index(
            "idx_calendar_events_school_start",
            "school_id",
            "start_date",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=EventType.EVENT.value)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organizer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    attendees: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
