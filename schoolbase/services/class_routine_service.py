"""Class routine service: weekly timetables per class and section."""

import logging
import uuid
from datetime import time

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import ClassRoutine, RoutinePeriod, Teacher
from schoolbase.models.class_routine import RoutineStatus
from schoolbase.schemas.class_routine import (
    ClassRoutineCreate,
    ClassRoutineDetail,
    ClassRoutineResponse,
    ClassRoutineUpdate,
    RoutinePeriodCreate,
    RoutinePeriodResponse,
    RoutineStats,
    TimeSlot,
)
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

# Generated slots get one short break after this period
BREAK_AFTER_PERIOD = 3
BREAK_MINUTES = 15

# Copied columns when duplicating; everything but identity and bookkeeping
_COPY_EXCLUDE = {"id", "school_id", "created_at", "updated_at", "deleted_at", "created_by"}


def _clock(minutes: int) -> str:
    return f"{(minutes // 60) % 24:02d}:{minutes % 60:02d}"


def build_time_slots(
    start_time: time,
    period_duration: int,
    periods_per_day: int,
    include_breaks: bool = True,
) -> list[TimeSlot]:
    """Lay out consecutive periods from ``start_time``."""
    slots = []
    current = start_time.hour * 60 + start_time.minute

    for number in range(1, periods_per_day + 1):
        end = current + period_duration
        slots.append(TimeSlot(
            period=number,
            start_time=_clock(current),
            end_time=_clock(end),
            label=f"Period {number}",
            label_bn=f"{number}ম পিরিয়ড",
        ))
        current = end

        if include_breaks and number == BREAK_AFTER_PERIOD:
            end = current + BREAK_MINUTES
            slots.append(TimeSlot(
                period=None,
                is_break=True,
                start_time=_clock(current),
                end_time=_clock(end),
                label="Break",
                label_bn="বিরতি",
            ))
            current = end

    return slots


class ClassRoutineService:
    """Service for managing class routines."""

    async def get_routines(
        self,
        db: AsyncSession,
        status: str | None = None,
        class_name: str | None = None,
        section: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[ClassRoutine], int]:
        """Get routines, newest first."""
        query = select(ClassRoutine).where(
            ClassRoutine.school_id == get_school_id(),
            ClassRoutine.deleted_at.is_(None),
        )

        if status:
            query = query.where(ClassRoutine.status == status)
        if class_name:
            query = query.where(ClassRoutine.class_name == class_name)
        if section:
            query = query.where(ClassRoutine.section == section)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(ClassRoutine.created_at.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def get_routine(self, db: AsyncSession, routine_id: uuid.UUID) -> ClassRoutine:
        """Get a routine by ID."""
        result = await db.execute(
            select(ClassRoutine).where(
                ClassRoutine.id == routine_id,
                ClassRoutine.school_id == get_school_id(),
                ClassRoutine.deleted_at.is_(None),
            )
        )
        routine = result.scalar_one_or_none()

        if not routine:
            raise NotFoundException("Class routine")

        return routine

    async def get_routine_detail(
        self, db: AsyncSession, routine_id: uuid.UUID
    ) -> ClassRoutineDetail:
        """A routine with its periods."""
        routine = await self.get_routine(db, routine_id)
        return await self._build_detail(db, routine)

    async def get_active_routine_for_class(
        self, db: AsyncSession, class_name: str, section: str | None
    ) -> ClassRoutineDetail:
        """The routine currently in effect for a class, latest effective date first."""
        if not class_name:
            raise NotFoundException("Class routine")

        query = select(ClassRoutine).where(
            ClassRoutine.school_id == get_school_id(),
            ClassRoutine.deleted_at.is_(None),
            ClassRoutine.status == RoutineStatus.ACTIVE.value,
            ClassRoutine.class_name == class_name,
        )
        if section:
            query = query.where(ClassRoutine.section == section)
        query = query.order_by(ClassRoutine.effective_date.desc()).limit(1)

        routine = (await db.execute(query)).scalar_one_or_none()
        if not routine:
            raise NotFoundException("Class routine")

        return await self._build_detail(db, routine)

    async def create_routine(
        self, db: AsyncSession, data: ClassRoutineCreate
    ) -> ClassRoutineDetail:
        """Create a routine together with its periods."""
        values = data.model_dump(exclude={"periods"})

        routine = ClassRoutine(
            school_id=get_school_id(),
            created_by=get_current_user_id_or_none(),
            **values,
        )
        db.add(routine)
        await db.flush()

        await self._add_periods(db, routine, data.periods)
        await db.flush()
        await db.refresh(routine)

        logger.info(
            f"Created routine {routine.id} for {routine.class_name} {routine.section} "
            f"with {len(data.periods)} periods"
        )

        return await self._build_detail(db, routine)

    async def update_routine(
        self, db: AsyncSession, routine_id: uuid.UUID, data: ClassRoutineUpdate
    ) -> ClassRoutineDetail:
        """Update a routine; a periods list replaces the existing grid."""
        routine = await self.get_routine(db, routine_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"periods"})

        for field, value in update_data.items():
            if value is None and not ClassRoutine.__table__.c[field].nullable:
                continue
            setattr(routine, field, value)

        if data.periods is not None:
            await db.execute(delete(RoutinePeriod).where(RoutinePeriod.routine_id == routine.id))
            await self._add_periods(db, routine, data.periods)

        await db.flush()
        await db.refresh(routine)

        return await self._build_detail(db, routine)

    async def delete_routine(self, db: AsyncSession, routine_id: uuid.UUID) -> None:
        """Soft delete a routine and drop its periods."""
        routine = await self.get_routine(db, routine_id)
        await db.execute(delete(RoutinePeriod).where(RoutinePeriod.routine_id == routine.id))
        routine.soft_delete()
        await db.flush()

    async def duplicate_routine(
        self, db: AsyncSession, routine_id: uuid.UUID
    ) -> ClassRoutineDetail:
        """Copy a routine and its periods into a new draft."""
        original = await self.get_routine(db, routine_id)

        values = {
            column.key: getattr(original, column.key)
            for column in ClassRoutine.__table__.columns
            if column.key not in _COPY_EXCLUDE
        }
        values["class_name"] = f"{original.class_name} (Copy)"
        values["status"] = RoutineStatus.DRAFT.value

        copy = ClassRoutine(
            school_id=original.school_id,
            created_by=get_current_user_id_or_none(),
            **values,
        )
        db.add(copy)
        await db.flush()

        for period in await self._get_periods(db, original.id):
            db.add(RoutinePeriod(
                routine_id=copy.id,
                **{
                    column.key: getattr(period, column.key)
                    for column in RoutinePeriod.__table__.columns
                    if column.key not in {"id", "routine_id", "created_at", "updated_at"}
                },
            ))

        await db.flush()
        await db.refresh(copy)

        logger.info(f"Duplicated routine {original.id} as {copy.id}")

        return await self._build_detail(db, copy)

    async def get_stats(self, db: AsyncSession) -> RoutineStats:
        """Routine counts by status."""
        result = await db.execute(
            select(ClassRoutine.status, func.count())
            .where(
                ClassRoutine.school_id == get_school_id(),
                ClassRoutine.deleted_at.is_(None),
            )
            .group_by(ClassRoutine.status)
        )
        counts = dict(result.all())

        return RoutineStats(
            total=sum(counts.values()),
            active=counts.get(RoutineStatus.ACTIVE.value, 0),
            draft=counts.get(RoutineStatus.DRAFT.value, 0),
            archived=counts.get(RoutineStatus.ARCHIVED.value, 0),
        )

    async def get_teachers(self, db: AsyncSession) -> list[Teacher]:
        """Active teachers to pick from when filling in periods."""
        result = await db.execute(
            select(Teacher)
            .where(
                Teacher.school_id == get_school_id(),
                Teacher.deleted_at.is_(None),
                Teacher.status == "active",
            )
            .order_by(Teacher.name)
        )
        return list(result.scalars().all())

    async def _add_periods(
        self, db: AsyncSession, routine: ClassRoutine, periods: list[RoutinePeriodCreate]
    ) -> None:
        """Validate and stage periods for a routine.

        Raises:
            ValidationException: If two periods share a day and number
            NotFoundException: If a teacher is not in this school
        """
        seen = set()
        for period in periods:
            slot = (period.day_of_week, period.period_number)
            if slot in seen:
                raise ValidationException(
                    [{
                        "field": "periods",
                        "message": f"Period {period.period_number} appears twice on day {period.day_of_week}",
                    }],
                    message="Duplicate periods in routine",
                )
            seen.add(slot)

        teacher_ids = {p.teacher_id for p in periods if p.teacher_id}
        teachers = {}
        if teacher_ids:
            result = await db.execute(
                select(Teacher).where(
                    Teacher.id.in_(teacher_ids),
                    Teacher.school_id == routine.school_id,
                    Teacher.deleted_at.is_(None),
                )
            )
            teachers = {t.id: t for t in result.scalars().all()}
            if len(teachers) != len(teacher_ids):
                raise NotFoundException("Teacher")

        for period in periods:
            values = period.model_dump()
            if period.teacher_id and not period.teacher_name:
                values["teacher_name"] = teachers[period.teacher_id].name
            db.add(RoutinePeriod(routine_id=routine.id, **values))

    async def _get_periods(self, db: AsyncSession, routine_id: uuid.UUID) -> list[RoutinePeriod]:
        result = await db.execute(
            select(RoutinePeriod)
            .where(RoutinePeriod.routine_id == routine_id)
            .order_by(RoutinePeriod.day_of_week, RoutinePeriod.period_number)
        )
        return list(result.scalars().all())

    async def _build_detail(self, db: AsyncSession, routine: ClassRoutine) -> ClassRoutineDetail:
        await db.flush()
        periods = await self._get_periods(db, routine.id)
        return ClassRoutineDetail(
            **ClassRoutineResponse.model_validate(routine).model_dump(),
            periods=[RoutinePeriodResponse.model_validate(p) for p in periods],
        )


def get_class_routine_service() -> ClassRoutineService:
    """Get class routine service instance."""
    return ClassRoutineService()
