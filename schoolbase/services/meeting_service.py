"""Meeting service for scheduling and running online meetings."""

import logging
import secrets
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import Meeting, User
from schoolbase.models.meeting import MeetingStatus
from schoolbase.schemas.meeting import (
    MeetingCreate,
    MeetingStats,
    MeetingStatusUpdate,
    MeetingUpdate,
)
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

# Completed and cancelled meetings are final
ALLOWED_TRANSITIONS = {
    MeetingStatus.SCHEDULED.value: {MeetingStatus.ONGOING.value, MeetingStatus.CANCELLED.value},
    MeetingStatus.ONGOING.value: {MeetingStatus.COMPLETED.value},
    MeetingStatus.COMPLETED.value: set(),
    MeetingStatus.CANCELLED.value: set(),
}


class MeetingService:
    """Service for managing meetings."""

    async def get_meetings(
        self,
        db: AsyncSession,
        status: str | None = None,
        meeting_type: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Meeting], int]:
        """Get meetings, most recently created first."""
        query = select(Meeting).where(
            Meeting.school_id == get_school_id(),
            Meeting.deleted_at.is_(None),
        )

        if status:
            query = query.where(Meeting.status == status)
        if meeting_type:
            query = query.where(Meeting.meeting_type == meeting_type)
        if date_from:
            query = query.where(Meeting.scheduled_at >= date_from)
        if date_to:
            query = query.where(Meeting.scheduled_at <= date_to)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(Meeting.created_at.desc(), Meeting.id.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def get_meeting(self, db: AsyncSession, meeting_id: uuid.UUID) -> Meeting:
        """Get a meeting by ID."""
        result = await db.execute(
            select(Meeting).where(
                Meeting.id == meeting_id,
                Meeting.school_id == get_school_id(),
                Meeting.deleted_at.is_(None),
            )
        )
        meeting = result.scalar_one_or_none()

        if not meeting:
            raise NotFoundException("Meeting")

        return meeting

    async def create_meeting(self, db: AsyncSession, data: MeetingCreate) -> Meeting:
        """Schedule a meeting hosted by the current user."""
        host_id = get_current_user_id_or_none()
        host = await db.get(User, host_id) if host_id else None
        token = secrets.token_hex(4).upper()

        meeting = Meeting(
            school_id=get_school_id(),
            host_id=host_id,
            host_name=host.full_name if host else None,
            meeting_code=f"MEET-{token}",
            room_id=f"room-{token.lower()}",
            **data.model_dump(),
        )
        db.add(meeting)
        await db.flush()
        await db.refresh(meeting)

        logger.info(f"Scheduled meeting {meeting.meeting_code} for {meeting.scheduled_at}")

        return meeting

    async def update_meeting(
        self, db: AsyncSession, meeting_id: uuid.UUID, data: MeetingUpdate
    ) -> Meeting:
        """Edit a meeting that is still scheduled."""
        meeting = await self.get_meeting(db, meeting_id)

        if meeting.status != MeetingStatus.SCHEDULED.value:
            raise ConflictException("Only scheduled meetings can be edited")

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not Meeting.__table__.c[field].nullable:
                continue
            setattr(meeting, field, value)

        if meeting.current_participants > meeting.max_participants:
            raise ValidationException(
                [{"field": "max_participants", "message": "Below the current participant count"}],
                message="Too few participant places",
            )

        await db.flush()
        await db.refresh(meeting)

        return meeting

    async def update_status(
        self, db: AsyncSession, meeting_id: uuid.UUID, data: MeetingStatusUpdate
    ) -> Meeting:
        """Move a meeting through its lifecycle.

        Raises:
            ConflictException: If the transition is not allowed
            ValidationException: If more participants than places are reported
        """
        meeting = await self.get_meeting(db, meeting_id)

        if data.status != meeting.status:
            if data.status not in ALLOWED_TRANSITIONS[meeting.status]:
                raise ConflictException(
                    f"Cannot change a {meeting.status} meeting to {data.status}"
                )
            now = datetime.now(timezone.utc)
            if data.status == MeetingStatus.ONGOING.value:
                meeting.started_at = now
            elif data.status == MeetingStatus.COMPLETED.value:
                meeting.ended_at = now
                meeting.is_recording = False
            meeting.status = data.status

        if data.current_participants is not None:
            if data.current_participants > meeting.max_participants:
                raise ValidationException(
                    [{
                        "field": "current_participants",
                        "message": f"At most {meeting.max_participants} participants",
                    }],
                    message="Meeting is full",
                )
            meeting.current_participants = data.current_participants

        if data.is_recording is not None and meeting.status == MeetingStatus.ONGOING.value:
            meeting.is_recording = data.is_recording

        await db.flush()
        await db.refresh(meeting)

        logger.info(f"Meeting {meeting.meeting_code} is now {meeting.status}")

        return meeting

    async def delete_meeting(self, db: AsyncSession, meeting_id: uuid.UUID) -> None:
        """Soft delete a meeting."""
        meeting = await self.get_meeting(db, meeting_id)
        meeting.soft_delete()
        await db.flush()

    async def get_stats(self, db: AsyncSession) -> MeetingStats:
        """Meeting counts by status and total participants."""
        result = await db.execute(
            select(
                Meeting.status,
                func.count(),
                func.coalesce(func.sum(Meeting.current_participants), 0),
            )
            .where(
                Meeting.school_id == get_school_id(),
                Meeting.deleted_at.is_(None),
            )
            .group_by(Meeting.status)
        )
        counts = {}
        participants = 0
        for status, count, attended in result.all():
            counts[status] = count
            participants += attended

        return MeetingStats(
            total_meetings=sum(counts.values()),
            scheduled_meetings=counts.get(MeetingStatus.SCHEDULED.value, 0),
            ongoing_meetings=counts.get(MeetingStatus.ONGOING.value, 0),
            completed_meetings=counts.get(MeetingStatus.COMPLETED.value, 0),
            cancelled_meetings=counts.get(MeetingStatus.CANCELLED.value, 0),
            total_participants=participants,
        )


def get_meeting_service() -> MeetingService:
    """Get meeting service instance."""
    return MeetingService()
