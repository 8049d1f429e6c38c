"""Student, parent and teacher portal endpoints.

Each portal is scoped to the caller. Students see their own records and
parents see their linked children. Teachers see their profile and class
lists, and take attendance.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.user import Role
from schoolbase.schemas.attendance import (
    AttendanceStats,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
    ClassAttendanceSheet,
    StudentAttendanceOverview,
)
from schoolbase.schemas.class_routine import ClassRoutineDetail
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.dashboard import (
    ChildOverview,
    StudentFeesOverview,
    StudentLoansOverview,
    TeacherPortalStats,
)
from schoolbase.schemas.notification import NotificationResponse
from schoolbase.schemas.student import StudentResponse
from schoolbase.schemas.teacher import TeacherResponse
from schoolbase.services.attendance_service import get_attendance_service
from schoolbase.services.class_routine_service import get_class_routine_service
from schoolbase.services.notification_service import get_notification_service
from schoolbase.services.portal_service import get_portal_service
from schoolbase.services.student_service import get_student_service
from schoolbase.utils.permissions import require_role


student_router = APIRouter()
parent_router = APIRouter()
teacher_router = APIRouter()


# Student portal

@student_router.get("/profile", response_model=APIResponse[StudentResponse])
@require_role(Role.STUDENT)
async def get_student_profile(db: AsyncSession = Depends(get_db)):
    """The caller's student record."""
    service = get_portal_service()
    student = await service.get_own_student(db)

    return APIResponse(data=StudentResponse.model_validate(student))


@student_router.get("/fees", response_model=APIResponse[StudentFeesOverview])
@require_role(Role.STUDENT)
async def get_student_fees(db: AsyncSession = Depends(get_db)):
    """The caller's fees with totals."""
    service = get_portal_service()
    student = await service.get_own_student(db)
    overview = await service.get_fees_overview(db, student.id)

    return APIResponse(data=overview)


@student_router.get("/library", response_model=APIResponse[StudentLoansOverview])
@require_role(Role.STUDENT)
async def get_student_loans(db: AsyncSession = Depends(get_db)):
    """The caller's library loans."""
    service = get_portal_service()
    student = await service.get_own_student(db)
    overview = await service.get_loans_overview(db, student.id)

    return APIResponse(data=overview)


@student_router.get("/attendance", response_model=APIResponse[StudentAttendanceOverview])
@require_role(Role.STUDENT)
async def get_student_attendance(
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """The caller's attendance with totals, by default for the last 30 days."""
    student = await get_portal_service().get_own_student(db)
    overview = await get_attendance_service().get_student_overview(
        db, student.id, date_from=date_from, date_to=date_to
    )

    return APIResponse(data=overview)


@student_router.get("/routine", response_model=APIResponse[ClassRoutineDetail])
@require_role(Role.STUDENT)
async def get_student_routine(db: AsyncSession = Depends(get_db)):
    """The active weekly routine of the caller's class and section."""
    student = await get_portal_service().get_own_student(db)
    routine = await get_class_routine_service().get_active_routine_for_class(
        db, student.class_name, student.section
    )

    return APIResponse(data=routine)


@student_router.get("/notifications", response_model=APIResponse[list[NotificationResponse]])
@require_role(Role.STUDENT)
async def get_student_notifications(
    unread_only: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Notifications addressed to the caller or the whole school."""
    service = get_notification_service()
    notifications, total = await service.get_notifications(
        db, unread_only=unread_only, page=page, page_size=page_size
    )

    return APIResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        pagination=PaginationMeta.build(page, page_size, total),
    )


# Parent portal

@parent_router.get("/children", response_model=APIResponse[list[ChildOverview]])
@require_role(Role.PARENT)
async def get_children(db: AsyncSession = Depends(get_db)):
    """The caller's linked children."""
    service = get_portal_service()
    children = await service.get_children(db)

    return APIResponse(data=children)


@parent_router.get("/children/{student_id}", response_model=APIResponse[StudentResponse])
@require_role(Role.PARENT)
async def get_child(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """One linked child."""
    service = get_portal_service()
    student = await service.get_child(db, student_id)

    return APIResponse(data=StudentResponse.model_validate(student))


@parent_router.get(
    "/children/{student_id}/fees",
    response_model=APIResponse[StudentFeesOverview],
)
@require_role(Role.PARENT)
async def get_child_fees(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """A linked child's fees with totals."""
    service = get_portal_service()
    student = await service.get_child(db, student_id)
    overview = await service.get_fees_overview(db, student.id)

    return APIResponse(data=overview)


@parent_router.get(
    "/children/{student_id}/library",
    response_model=APIResponse[StudentLoansOverview],
)
@require_role(Role.PARENT)
async def get_child_loans(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """A linked child's library loans."""
    service = get_portal_service()
    student = await service.get_child(db, student_id)
    overview = await service.get_loans_overview(db, student.id)

    return APIResponse(data=overview)


@parent_router.get(
    "/children/{student_id}/attendance",
    response_model=APIResponse[StudentAttendanceOverview],
)
@require_role(Role.PARENT)
async def get_child_attendance(
    student_id: uuid.UUID,
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """A linked child's attendance with totals."""
    student = await get_portal_service().get_child(db, student_id)
    overview = await get_attendance_service().get_student_overview(
        db, student.id, date_from=date_from, date_to=date_to
    )

    return APIResponse(data=overview)


# Teacher portal

@teacher_router.get("/profile", response_model=APIResponse[TeacherResponse])
@require_role(Role.TEACHER)
async def get_teacher_profile(db: AsyncSession = Depends(get_db)):
    """The caller's teacher record."""
    service = get_portal_service()
    teacher = await service.get_own_teacher(db)

    return APIResponse(data=TeacherResponse.model_validate(teacher))


@teacher_router.get("/stats", response_model=APIResponse[TeacherPortalStats])
@require_role(Role.TEACHER)
async def get_teacher_stats(db: AsyncSession = Depends(get_db)):
    """Class sizes and upcoming work."""
    service = get_portal_service()
    stats = await service.get_teacher_stats(db)

    return APIResponse(data=stats)


@teacher_router.get("/students", response_model=APIResponse[list[StudentResponse]])
@require_role(Role.TEACHER)
async def get_class_students(
    class_name: str | None = None,
    section: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Active students, optionally for one class and section."""
    service = get_student_service()
    students, total = await service.get_students(
        db,
        class_name=class_name,
        section=section,
        status="active",
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[StudentResponse.model_validate(s) for s in students],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@teacher_router.get("/attendance", response_model=APIResponse[ClassAttendanceSheet])
@require_role(Role.TEACHER)
async def get_attendance_sheet(
    class_name: str = Query(..., min_length=1),
    section: str | None = None,
    subject: str | None = None,
    target_date: date | None = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
):
    """The attendance form for a class, day and subject."""
    service = get_attendance_service()
    sheet = await service.get_class_sheet(
        db,
        class_name=class_name,
        section=section,
        target_date=target_date,
        subject=subject,
    )

    return APIResponse(data=sheet)


@teacher_router.post("/attendance/save", response_model=APIResponse[BulkAttendanceResponse])
@require_role(Role.TEACHER)
async def save_attendance(
    data: BulkAttendanceCreate,
    db: AsyncSession = Depends(get_db),
):
    """Save the attendance taken for a class."""
    service = get_attendance_service()
    result = await service.save_class_attendance(db, data)
    await db.commit()

    return APIResponse(data=result, message="Attendance saved successfully")


@teacher_router.get("/attendance/stats", response_model=APIResponse[AttendanceStats])
@require_role(Role.TEACHER)
async def get_attendance_stats(
    class_name: str | None = None,
    section: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Attendance totals for a class, by default for the current month."""
    service = get_attendance_service()
    stats = await service.get_stats(
        db,
        class_name=class_name,
        section=section,
        date_from=date_from,
        date_to=date_to,
    )

    return APIResponse(data=stats)
