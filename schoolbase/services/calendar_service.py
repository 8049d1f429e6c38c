"""Calendar service for school events."""

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import CalendarEvent
from schoolbase.schemas.calendar import EventCreate, EventUpdate
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id, is_staff


class CalendarService:
    """Service for calendar events."""

    def _base_query(self):
        query = select(CalendarEvent).where(
            CalendarEvent.school_id == get_school_id(),
            CalendarEvent.deleted_at.is_(None),
        )
        # Parents and students only see public events
        if not is_staff():
            query = query.where(CalendarEvent.is_public.is_(True))
        return query

    async def get_events(
        self,
        db: AsyncSession,
        type: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[CalendarEvent]:
        """Get events, optionally of one type and overlapping a date range."""
        query = self._base_query()

        if type:
            query = query.where(CalendarEvent.type == type)
        if start_date:
            query = query.where(CalendarEvent.end_date >= start_date)
        if end_date:
            query = query.where(CalendarEvent.start_date <= end_date)

        result = await db.execute(
            query.order_by(CalendarEvent.start_date, CalendarEvent.start_time)
        )
        return list(result.scalars().all())

    async def get_events_in_range(
        self, db: AsyncSession, start_date: date, end_date: date
    ) -> list[CalendarEvent]:
        """Get events overlapping a date range."""
        if end_date < start_date:
            raise ValidationException(
                [{"field": "end_date", "message": "end_date must be on or after start_date"}],
                message="Invalid date range",
            )
        return await self.get_events(db, start_date=start_date, end_date=end_date)

    async def get_today_events(self, db: AsyncSession) -> list[CalendarEvent]:
        """Get events happening today."""
        today = date.today()
        return await self.get_events(db, start_date=today, end_date=today)

    async def get_upcoming_events(self, db: AsyncSession, limit: int = 10) -> list[CalendarEvent]:
        """Get the next events starting from today."""
        query = (
            self._base_query()
            .where(CalendarEvent.end_date >= date.today())
            .order_by(CalendarEvent.start_date, CalendarEvent.start_time)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_event(self, db: AsyncSession, event_id: uuid.UUID) -> CalendarEvent:
        """Get a single event by ID."""
        result = await db.execute(self._base_query().where(CalendarEvent.id == event_id))
        event = result.scalar_one_or_none()

        if not event:
            raise NotFoundException("Event")

        return event

    async def create_event(self, db: AsyncSession, data: EventCreate) -> CalendarEvent:
        """Create an event; single-day when no end date is given."""
        values = data.model_dump()
        values["end_date"] = values["end_date"] or values["start_date"]

        event = CalendarEvent(
            school_id=get_school_id(),
            created_by=get_current_user_id_or_none(),
            **values,
        )
        db.add(event)
        await db.flush()
        await db.refresh(event)

        return event

    async def update_event(
        self, db: AsyncSession, event_id: uuid.UUID, data: EventUpdate
    ) -> CalendarEvent:
        """Update an event."""
        event = await self.get_event(db, event_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or CalendarEvent.__table__.c[field].nullable
        }

        start = update_data.get("start_date", event.start_date)
        end = update_data.get("end_date", event.end_date)
        if end < start:
            raise ValidationException(
                [{"field": "end_date", "message": "end_date must be on or after start_date"}],
                message="Invalid date range",
            )

        for field, value in update_data.items():
            setattr(event, field, value)

        await db.flush()
        await db.refresh(event)

        return event

    async def delete_event(self, db: AsyncSession, event_id: uuid.UUID) -> None:
        """Soft delete an event."""
        event = await self.get_event(db, event_id)
        event.soft_delete()
        await db.flush()


def get_calendar_service() -> CalendarService:
    """Get calendar service instance."""
    return CalendarService()
