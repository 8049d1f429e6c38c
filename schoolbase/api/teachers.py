"""Teacher API endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.teacher import TeacherCreate, TeacherResponse, TeacherUpdate
from schoolbase.services.teacher_service import get_teacher_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[TeacherResponse]])
@require_staff()
async def list_teachers(
    subject: str | None = None,
    status: str | None = None,
    search: str | None = Query(None, description="Search by name, code or phone"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List teachers with optional filters."""
    service = get_teacher_service()
    teachers, total = await service.get_teachers(
        db,
        subject=subject,
        status=status,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[TeacherResponse.model_validate(t) for t in teachers],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[TeacherResponse], status_code=201)
@require_school_admin()
async def create_teacher(
    data: TeacherCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new teacher."""
    service = get_teacher_service()
    teacher = await service.create_teacher(db, data)
    await db.commit()

    return APIResponse(
        data=TeacherResponse.model_validate(teacher),
        message="Teacher created successfully",
    )


@router.get("/{teacher_id}", response_model=APIResponse[TeacherResponse])
@require_staff()
async def get_teacher(
    teacher_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get teacher details."""
    service = get_teacher_service()
    teacher = await service.get_teacher(db, teacher_id)

    return APIResponse(data=TeacherResponse.model_validate(teacher))


@router.patch("/{teacher_id}", response_model=APIResponse[TeacherResponse])
@require_school_admin()
async def update_teacher(
    teacher_id: uuid.UUID,
    data: TeacherUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a teacher."""
    service = get_teacher_service()
    teacher = await service.update_teacher(db, teacher_id, data)
    await db.commit()

    return APIResponse(
        data=TeacherResponse.model_validate(teacher),
        message="Teacher updated successfully",
    )


@router.delete("/{teacher_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_teacher(
    teacher_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Soft delete a teacher."""
    service = get_teacher_service()
    await service.delete_teacher(db, teacher_id)
    await db.commit()

    return APIResponse(message="Teacher deleted successfully")
