"""Super admin API routes for school management."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.school import SchoolCreate, SchoolResponse, SchoolStats, SchoolUpdate
from schoolbase.services.school_service import get_school_service
from schoolbase.utils.permissions import require_super_admin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=APIResponse[list[SchoolResponse]])
@require_super_admin()
async def list_schools(
    is_active: bool | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List all schools with optional filters (Super Admin only)."""
    service = get_school_service()
    schools, total = await service.get_schools(
        db,
        is_active=is_active,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[SchoolResponse.model_validate(s) for s in schools],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[SchoolResponse], status_code=201)
@require_super_admin()
async def create_school(
    data: SchoolCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a school, its default settings and optionally its first admin."""
    service = get_school_service()
    school = await service.create_school(db, data)
    await db.commit()

    logger.info(f"School created: {school.slug}")

    return APIResponse(
        data=SchoolResponse.model_validate(school),
        message="School created successfully",
    )


@router.get("/{school_id}", response_model=APIResponse[SchoolResponse])
@require_super_admin()
async def get_school(
    school_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get school details."""
    service = get_school_service()
    school = await service.get_school(db, school_id)

    return APIResponse(data=SchoolResponse.model_validate(school))


@router.patch("/{school_id}", response_model=APIResponse[SchoolResponse])
@require_super_admin()
async def update_school(
    school_id: uuid.UUID,
    data: SchoolUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a school."""
    service = get_school_service()
    school = await service.update_school(db, school_id, data)
    await db.commit()

    return APIResponse(
        data=SchoolResponse.model_validate(school),
        message="School updated successfully",
    )


@router.delete("/{school_id}", response_model=APIResponse[None])
@require_super_admin()
async def delete_school(
    school_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Soft delete a school."""
    service = get_school_service()
    await service.delete_school(db, school_id)
    await db.commit()

    logger.info(f"School deleted: {school_id}")

    return APIResponse(message="School deleted successfully")


@router.get("/{school_id}/stats", response_model=APIResponse[SchoolStats])
@require_super_admin()
async def get_school_stats(
    school_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get headline counts for a school."""
    service = get_school_service()
    stats = await service.get_school_stats(db, school_id)

    return APIResponse(data=stats)
