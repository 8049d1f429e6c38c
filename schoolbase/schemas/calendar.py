"""Pydantic schemas for calendar events."""

import uuid
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.calendar import EventType
from schoolbase.schemas.common import DateRangeMixin


class EventCreate(DateRangeMixin):
    """Schema for creating a calendar event.

    ``end_date`` defaults to ``start_date`` for single-day events.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    description: str | None = None
    start_date: date
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    type: EventType = Field(EventType.EVENT, validate_default=True)
    is_public: bool = True
    location: str | None = Field(None, max_length=255)
    organizer: str | None = Field(None, max_length=255)
    attendees: list[Any] = Field(default_factory=list)


class EventUpdate(BaseModel):
    """Schema for updating a calendar event."""

    model_config = ConfigDict(use_enum_values=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    type: EventType | None = None
    is_public: bool | None = None
    location: str | None = Field(None, max_length=255)
    organizer: str | None = Field(None, max_length=255)
    attendees: list[Any] | None = None


class EventResponse(BaseModel):
    """Schema for calendar event response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    title_bn: str | None
    description: str | None
    start_date: date
    end_date: date
    start_time: time | None
    end_time: time | None
    type: str
    is_public: bool
    location: str | None
    organizer: str | None
    attendees: list[Any]
    created_by: uuid.UUID | None
    created_at: datetime
