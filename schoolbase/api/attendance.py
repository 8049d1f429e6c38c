"""Attendance API endpoints."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.attendance import AttendanceStatus
from schoolbase.schemas.attendance import (
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceRecordUpdate,
    AttendanceStats,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
    ClassAttendanceSheet,
    StudentAttendanceOverview,
)
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.services.attendance_service import get_attendance_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[AttendanceRecordResponse]])
@require_staff()
async def list_attendance(
    class_name: str | None = None,
    section: str | None = None,
    subject: str | None = None,
    student_id: uuid.UUID | None = None,
    date_from: date | None = Query(None, description="Filter from date"),
    date_to: date | None = Query(None, description="Filter to date"),
    status: AttendanceStatus | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """List attendance records with optional filters."""
    service = get_attendance_service()
    records, total = await service.get_records(
        db,
        class_name=class_name,
        section=section,
        subject=subject,
        student_id=student_id,
        date_from=date_from,
        date_to=date_to,
        status=status.value if status else None,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=records,
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[AttendanceRecordResponse], status_code=201)
@require_staff()
async def create_attendance(
    data: AttendanceRecordCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record attendance for a single student."""
    service = get_attendance_service()
    record = await service.create_record(db, data)
    await db.commit()

    return APIResponse(data=record, message="Attendance recorded successfully")


@router.post("/bulk", response_model=APIResponse[BulkAttendanceResponse])
@require_staff()
async def save_class_attendance(
    data: BulkAttendanceCreate,
    db: AsyncSession = Depends(get_db),
):
    """Save a class attendance sheet.

    Students already marked for the day and subject are updated.
    """
    service = get_attendance_service()
    result = await service.save_class_attendance(db, data)
    await db.commit()

    return APIResponse(data=result, message="Attendance saved successfully")


@router.get("/class", response_model=APIResponse[ClassAttendanceSheet])
@require_staff()
async def get_class_sheet(
    class_name: str = Query(..., min_length=1),
    section: str | None = None,
    subject: str | None = None,
    target_date: date | None = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
):
    """The class roster with each student's mark for the day."""
    service = get_attendance_service()
    sheet = await service.get_class_sheet(
        db,
        class_name=class_name,
        section=section,
        target_date=target_date,
        subject=subject,
    )

    return APIResponse(data=sheet)


@router.get("/stats", response_model=APIResponse[AttendanceStats])
@require_staff()
async def get_attendance_stats(
    class_name: str | None = None,
    section: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Attendance totals, by default for the current month."""
    service = get_attendance_service()
    stats = await service.get_stats(
        db,
        class_name=class_name,
        section=section,
        date_from=date_from,
        date_to=date_to,
    )

    return APIResponse(data=stats)


@router.get("/student/{student_id}", response_model=APIResponse[StudentAttendanceOverview])
@require_staff()
async def get_student_attendance(
    student_id: uuid.UUID,
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """A student's attendance history with totals."""
    service = get_attendance_service()
    overview = await service.get_student_overview(
        db, student_id, date_from=date_from, date_to=date_to
    )

    return APIResponse(data=overview)


@router.get("/{record_id}", response_model=APIResponse[AttendanceRecordResponse])
@require_staff()
async def get_attendance_record(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a single attendance record."""
    service = get_attendance_service()
    record = await service.get_record(db, record_id)

    return APIResponse(data=record)


@router.patch("/{record_id}", response_model=APIResponse[AttendanceRecordResponse])
@require_staff()
async def update_attendance(
    record_id: uuid.UUID,
    data: AttendanceRecordUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Correct an attendance record."""
    service = get_attendance_service()
    record = await service.update_record(db, record_id, data)
    await db.commit()

    return APIResponse(data=record, message="Attendance updated successfully")


@router.delete("/{record_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_attendance(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an attendance record."""
    service = get_attendance_service()
    await service.delete_record(db, record_id)
    await db.commit()

    return APIResponse(message="Attendance record deleted successfully")
