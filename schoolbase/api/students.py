"""Student API endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.student import ParentStudent, StudentStatus
from schoolbase.models.user import User
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.student import (
    LinkParentRequest,
    ParentInfo,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from schoolbase.services.student_service import get_student_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


def _build_parent_info(parent: User, link: ParentStudent) -> ParentInfo:
    return ParentInfo(
        id=parent.id,
        first_name=parent.first_name,
        last_name=parent.last_name,
        email=parent.email,
        phone=parent.phone,
        relationship_type=link.relationship_type,
        is_primary=link.is_primary,
    )


@router.get("", response_model=APIResponse[list[StudentResponse]])
@require_staff()
async def list_students(
    class_name: str | None = Query(None, description="Filter by class"),
    section: str | None = Query(None, description="Filter by section"),
    status: StudentStatus | None = Query(None, description="Filter by status"),
    search: str | None = Query(None, description="Search by name, code or phone"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
):
    """List students with optional filters."""
    service = get_student_service()
    students, total = await service.get_students(
        db,
        class_name=class_name,
        section=section,
        status=status.value if status else None,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[StudentResponse.model_validate(s) for s in students],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[StudentResponse], status_code=201)
@require_staff()
async def create_student(
    data: StudentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new student."""
    service = get_student_service()
    student = await service.create_student(db, data)
    await db.commit()

    return APIResponse(
        data=StudentResponse.model_validate(student),
        message="Student created successfully",
    )


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
@require_staff()
async def get_student(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get student details."""
    service = get_student_service()
    student = await service.get_student(db, student_id)

    return APIResponse(data=StudentResponse.model_validate(student))


@router.patch("/{student_id}", response_model=APIResponse[StudentResponse])
@require_staff()
async def update_student(
    student_id: uuid.UUID,
    data: StudentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a student."""
    service = get_student_service()
    student = await service.update_student(db, student_id, data)
    await db.commit()

    return APIResponse(
        data=StudentResponse.model_validate(student),
        message="Student updated successfully",
    )


@router.delete("/{student_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_student(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Soft delete a student."""
    service = get_student_service()
    await service.delete_student(db, student_id)
    await db.commit()

    return APIResponse(message="Student deleted successfully")


@router.get("/{student_id}/parents", response_model=APIResponse[list[ParentInfo]])
@require_staff()
async def get_student_parents(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get parents linked to a student."""
    service = get_student_service()
    parents = await service.get_student_parents(db, student_id)

    return APIResponse(data=[_build_parent_info(p, link) for p, link in parents])


@router.post(
    "/{student_id}/parents",
    response_model=APIResponse[ParentInfo],
    status_code=201,
)
@require_school_admin()
async def link_parent(
    student_id: uuid.UUID,
    data: LinkParentRequest,
    db: AsyncSession = Depends(get_db),
):
    """Link a parent account to a student."""
    service = get_student_service()
    parent, link = await service.link_parent(db, student_id, data)
    await db.commit()

    return APIResponse(
        data=_build_parent_info(parent, link),
        message="Parent linked successfully",
    )


@router.delete("/{student_id}/parents/{parent_id}", response_model=APIResponse[None])
@require_school_admin()
async def unlink_parent(
    student_id: uuid.UUID,
    parent_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Remove a parent link from a student."""
    service = get_student_service()
    await service.unlink_parent(db, student_id, parent_id)
    await db.commit()

    return APIResponse(message="Parent unlinked successfully")
