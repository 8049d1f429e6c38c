"""Class routine API endpoints."""

import uuid
from datetime import time

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.class_routine import RoutineStatus
from schoolbase.schemas.class_routine import (
    ClassRoutineCreate,
    ClassRoutineDetail,
    ClassRoutineResponse,
    ClassRoutineUpdate,
    RoutineStats,
    RoutineTeacher,
    TimeSlot,
)
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.services.class_routine_service import build_time_slots, get_class_routine_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[ClassRoutineResponse]])
@require_staff()
async def list_routines(
    status: RoutineStatus | None = Query(None, description="Filter by status"),
    class_name: str | None = None,
    section: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List class routines, newest first."""
    service = get_class_routine_service()
    routines, total = await service.get_routines(
        db,
        status=status.value if status else None,
        class_name=class_name,
        section=section,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[ClassRoutineResponse.model_validate(r) for r in routines],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[ClassRoutineDetail], status_code=201)
@require_staff()
async def create_routine(
    data: ClassRoutineCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a class routine with its periods."""
    service = get_class_routine_service()
    routine = await service.create_routine(db, data)
    await db.commit()

    return APIResponse(data=routine, message="Class routine created successfully")


@router.get("/stats", response_model=APIResponse[RoutineStats])
@require_staff()
async def get_routine_stats(db: AsyncSession = Depends(get_db)):
    """Routine counts by status."""
    service = get_class_routine_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)


@router.get("/teachers", response_model=APIResponse[list[RoutineTeacher]])
@require_staff()
async def list_routine_teachers(db: AsyncSession = Depends(get_db)):
    """Active teachers available for routine periods."""
    service = get_class_routine_service()
    teachers = await service.get_teachers(db)

    return APIResponse(data=[RoutineTeacher.model_validate(t) for t in teachers])


@router.get("/time-slots", response_model=APIResponse[list[TimeSlot]])
@require_staff()
async def get_time_slots(
    start_time: time = Query(time(8, 0), description="First period start (HH:MM)"),
    period_duration: int = Query(45, ge=30, le=60, description="Minutes per period"),
    periods_per_day: int = Query(7, ge=5, le=10),
    include_breaks: bool = True,
):
    """Generate the day's period times for a new routine."""
    slots = build_time_slots(start_time, period_duration, periods_per_day, include_breaks)

    return APIResponse(data=slots)


@router.get("/{routine_id}", response_model=APIResponse[ClassRoutineDetail])
@require_staff()
async def get_routine(
    routine_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a routine with its periods."""
    service = get_class_routine_service()
    routine = await service.get_routine_detail(db, routine_id)

    return APIResponse(data=routine)


@router.patch("/{routine_id}", response_model=APIResponse[ClassRoutineDetail])
@require_staff()
async def update_routine(
    routine_id: uuid.UUID,
    data: ClassRoutineUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a routine. Sending periods replaces the whole grid."""
    service = get_class_routine_service()
    routine = await service.update_routine(db, routine_id, data)
    await db.commit()

    return APIResponse(data=routine, message="Class routine updated successfully")


@router.post("/{routine_id}/duplicate", response_model=APIResponse[ClassRoutineDetail], status_code=201)
@require_staff()
async def duplicate_routine(
    routine_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Copy a routine into a new draft."""
    service = get_class_routine_service()
    routine = await service.duplicate_routine(db, routine_id)
    await db.commit()

    return APIResponse(data=routine, message="Class routine duplicated successfully")


@router.delete("/{routine_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_routine(
    routine_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a routine and its periods."""
    service = get_class_routine_service()
    await service.delete_routine(db, routine_id)
    await db.commit()

    return APIResponse(message="Class routine deleted successfully")
