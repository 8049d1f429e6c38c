"""Meeting API endpoints."""

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.meeting import MeetingStatus, MeetingType
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.meeting import (
    MeetingCreate,
    MeetingResponse,
    MeetingStats,
    MeetingStatusUpdate,
    MeetingUpdate,
)
from schoolbase.services.meeting_service import get_meeting_service
from schoolbase.utils.permissions import require_authenticated, require_school_admin, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[MeetingResponse]])
@require_authenticated()
async def list_meetings(
    status: MeetingStatus | None = None,
    meeting_type: MeetingType | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List meetings, most recently created first."""
    service = get_meeting_service()
    meetings, total = await service.get_meetings(
        db,
        status=status.value if status else None,
        meeting_type=meeting_type.value if meeting_type else None,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[MeetingResponse.model_validate(m) for m in meetings],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[MeetingResponse], status_code=201)
@require_staff()
async def create_meeting(
    data: MeetingCreate,
    db: AsyncSession = Depends(get_db),
):
    """Schedule a meeting hosted by the caller."""
    service = get_meeting_service()
    meeting = await service.create_meeting(db, data)
    await db.commit()

    return APIResponse(
        data=MeetingResponse.model_validate(meeting),
        message="Meeting created successfully",
    )


@router.get("/stats", response_model=APIResponse[MeetingStats])
@require_authenticated()
async def get_meeting_stats(db: AsyncSession = Depends(get_db)):
    """Meeting counts by status."""
    service = get_meeting_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)


@router.get("/{meeting_id}", response_model=APIResponse[MeetingResponse])
@require_authenticated()
async def get_meeting(
    meeting_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a meeting."""
    service = get_meeting_service()
    meeting = await service.get_meeting(db, meeting_id)

    return APIResponse(data=MeetingResponse.model_validate(meeting))


@router.patch("/{meeting_id}", response_model=APIResponse[MeetingResponse])
@require_staff()
async def update_meeting(
    meeting_id: uuid.UUID,
    data: MeetingUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit a meeting that has not started."""
    service = get_meeting_service()
    meeting = await service.update_meeting(db, meeting_id, data)
    await db.commit()

    return APIResponse(
        data=MeetingResponse.model_validate(meeting),
        message="Meeting updated successfully",
    )


@router.patch("/{meeting_id}/status", response_model=APIResponse[MeetingResponse])
@require_staff()
async def update_meeting_status(
    meeting_id: uuid.UUID,
    data: MeetingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Start, end or cancel a meeting."""
    service = get_meeting_service()
    meeting = await service.update_status(db, meeting_id, data)
    await db.commit()

    return APIResponse(
        data=MeetingResponse.model_validate(meeting),
        message="Meeting status updated",
    )


@router.delete("/{meeting_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_meeting(
    meeting_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a meeting."""
    service = get_meeting_service()
    await service.delete_meeting(db, meeting_id)
    await db.commit()

    return APIResponse(message="Meeting deleted successfully")
