"""Online meeting model."""

import uuid
from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class MeetingStatus(str, Enum):
    """Meeting lifecycle states."""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MeetingType(str, Enum):
    CLASS = "class"
    STAFF = "staff"
    PARENT = "parent"
    GENERAL = "general"


class Meeting(SchoolScopedModel):
    """A scheduled video meeting hosted by a staff member."""

    __tablename__ = "meetings"
    __table_args__ = (
        Index(
            "idx_meetings_school_scheduled",
            "school_id",
            "scheduled_at",
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_meetings_code", "meeting_code", unique=True),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    meeting_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MeetingType.CLASS.value
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    current_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    meeting_code: Mapped[str] = mapped_column(String(50), nullable=False)
    room_id: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MeetingStatus.SCHEDULED.value
    )
    is_recording: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    host_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    host_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def ends_at(self) -> datetime:
        """Planned end of the meeting."""
        return self.scheduled_at + timedelta(minutes=self.duration)
