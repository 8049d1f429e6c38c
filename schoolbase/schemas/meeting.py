"""Pydantic schemas for meetings."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.meeting import MeetingStatus, MeetingType


class MeetingCreate(BaseModel):
    """Schema for scheduling a meeting."""

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    description: str | None = None
    description_bn: str | None = None
    meeting_type: MeetingType = Field(MeetingType.CLASS, validate_default=True)
    scheduled_at: datetime
    duration: int = Field(60, ge=5, le=480)
    max_participants: int = Field(50, ge=2, le=1000)


class MeetingUpdate(BaseModel):
    """Schema for editing a meeting that has not started."""

    model_config = ConfigDict(use_enum_values=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    description: str | None = None
    description_bn: str | None = None
    meeting_type: MeetingType | None = None
    scheduled_at: datetime | None = None
    duration: int | None = Field(None, ge=5, le=480)
    max_participants: int | None = Field(None, ge=2, le=1000)


class MeetingStatusUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: MeetingStatus
    current_participants: int | None = Field(None, ge=0)
    is_recording: bool | None = None


class MeetingResponse(BaseModel):
    """Schema for meeting response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    title_bn: str | None
    description: str | None
    description_bn: str | None
    meeting_type: str
    scheduled_at: datetime
    ends_at: datetime
    duration: int
    max_participants: int
    current_participants: int
    meeting_code: str
    room_id: str
    status: str
    is_recording: bool
    host_id: uuid.UUID | None
    host_name: str | None
    started_at: datetime | None
    ended_at: datetime | None
    created_at: datetime


class MeetingStats(BaseModel):
    total_meetings: int
    scheduled_meetings: int
    ongoing_meetings: int
    completed_meetings: int
    cancelled_meetings: int
    total_participants: int
