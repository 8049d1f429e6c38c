"""Pydantic schemas for notifications."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.notification import NotificationPriority, NotificationType


class NotificationCreate(BaseModel):
    """Schema for sending a notification.

    Leave ``recipient_id`` empty to notify the whole school.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    message: str = Field(..., min_length=1)
    message_bn: str | None = None
    type: NotificationType = Field(NotificationType.INFO, validate_default=True)
    priority: NotificationPriority = Field(NotificationPriority.MEDIUM, validate_default=True)
    category: str = Field("general", max_length=50)
    recipient_id: uuid.UUID | None = None
    is_public: bool = False
    action_required: bool = False


class MarkReadRequest(BaseModel):
    """Ids of notifications to mark read."""

    notification_ids: list[uuid.UUID] = Field(..., min_length=1)


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    title_bn: str | None
    message: str
    message_bn: str | None
    type: str
    priority: str
    category: str
    recipient_id: uuid.UUID | None
    is_public: bool
    action_required: bool
    is_read: bool
    read_at: datetime | None
    sender: str | None
    created_at: datetime


class NotificationStats(BaseModel):
    """Notification counts for the caller."""

    total: int
    unread: int
    urgent: int
    action_required: int
