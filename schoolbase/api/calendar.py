"""Calendar event API endpoints."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.calendar import EventType
from schoolbase.schemas.calendar import EventCreate, EventResponse, EventUpdate
from schoolbase.schemas.common import APIResponse
from schoolbase.services.calendar_service import get_calendar_service
from schoolbase.utils.permissions import require_authenticated, require_staff

router = APIRouter()


@router.get("/events", response_model=APIResponse[list[EventResponse]])
@require_authenticated()
async def list_events(
    type: EventType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List events, earliest first."""
    service = get_calendar_service()
    events = await service.get_events(
        db,
        type=type.value if type else None,
        start_date=start_date,
        end_date=end_date,
    )

    return APIResponse(data=[EventResponse.model_validate(e) for e in events])


@router.post("/events", response_model=APIResponse[EventResponse], status_code=201)
@require_staff()
async def create_event(
    data: EventCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a calendar event."""
    service = get_calendar_service()
    event = await service.create_event(db, data)
    await db.commit()

    return APIResponse(
        data=EventResponse.model_validate(event),
        message="Event created successfully",
    )


@router.get("/events/today", response_model=APIResponse[list[EventResponse]])
@require_authenticated()
async def get_today_events(db: AsyncSession = Depends(get_db)):
    """Events happening today."""
    service = get_calendar_service()
    events = await service.get_today_events(db)

    return APIResponse(data=[EventResponse.model_validate(e) for e in events])


@router.get("/events/upcoming", response_model=APIResponse[list[EventResponse]])
@require_authenticated()
async def get_upcoming_events(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """The next events from today on."""
    service = get_calendar_service()
    events = await service.get_upcoming_events(db, limit=limit)

    return APIResponse(data=[EventResponse.model_validate(e) for e in events])


@router.get("/events/range", response_model=APIResponse[list[EventResponse]])
@require_authenticated()
async def get_events_in_range(
    start_date: date,
    end_date: date,
    db: AsyncSession = Depends(get_db),
):
    """Events overlapping a date range."""
    service = get_calendar_service()
    events = await service.get_events_in_range(db, start_date, end_date)

    return APIResponse(data=[EventResponse.model_validate(e) for e in events])


@router.get("/events/{event_id}", response_model=APIResponse[EventResponse])
@require_authenticated()
async def get_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an event."""
    service = get_calendar_service()
    event = await service.get_event(db, event_id)

    return APIResponse(data=EventResponse.model_validate(event))


@router.patch("/events/{event_id}", response_model=APIResponse[EventResponse])
@require_staff()
async def update_event(
    event_id: uuid.UUID,
    data: EventUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an event."""
    service = get_calendar_service()
    event = await service.update_event(db, event_id, data)
    await db.commit()

    return APIResponse(
        data=EventResponse.model_validate(event),
        message="Event updated successfully",
    )


@router.delete("/events/{event_id}", response_model=APIResponse[None])
@require_staff()
async def delete_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an event."""
    service = get_calendar_service()
    await service.delete_event(db, event_id)
    await db.commit()

    return APIResponse(message="Event deleted successfully")
