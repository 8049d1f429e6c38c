"""Notification model for in-app notifications."""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class NotificationType(str, Enum):
    """Visual severity of a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    URGENT = "urgent"


class NotificationPriority(str, Enum):
    """Priority of a notification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Notification(SchoolScopedModel):
    """In-app notification for one user or, with no recipient, the whole school."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index(
            "idx_notifications_recipient_unread",
            "recipient_id",
            "is_read",
            postgresql_where=text("is_read = false"),
        ),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    message_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NotificationType.INFO.value
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NotificationPriority.MEDIUM.value
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="general")
    recipient_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,  # NULL for school-wide notifications
    )
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    action_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sender: Mapped[str | None] = mapped_column(String(255), nullable=True)
