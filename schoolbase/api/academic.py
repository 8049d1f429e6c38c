"""Academic year and term API endpoints."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.exceptions import NotFoundException
from schoolbase.models.academic import AcademicYearStatus
from schoolbase.schemas.academic import (
    AcademicTermCreate,
    AcademicTermResponse,
    AcademicTermUpdate,
    AcademicYearCreate,
    AcademicYearResponse,
    AcademicYearStats,
    AcademicYearStatusUpdate,
    AcademicYearUpdate,
)
from schoolbase.schemas.common import APIResponse
from schoolbase.services.academic_service import get_academic_service
from schoolbase.utils.permissions import require_authenticated, require_school_admin, require_staff

router = APIRouter()


# Academic years

@router.get("/years", response_model=APIResponse[list[AcademicYearResponse]])
@require_staff()
async def list_years(
    status: AcademicYearStatus | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List academic years, latest first."""
    service = get_academic_service()
    years = await service.get_years(db, status=status.value if status else None)

    return APIResponse(data=[AcademicYearResponse.model_validate(y) for y in years])


@router.post("/years", response_model=APIResponse[AcademicYearResponse], status_code=201)
@require_school_admin()
async def create_year(
    data: AcademicYearCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an academic year."""
    service = get_academic_service()
    year = await service.create_year(db, data)
    await db.commit()

    return APIResponse(
        data=AcademicYearResponse.model_validate(year),
        message="Academic year created successfully",
    )


@router.get("/years/stats", response_model=APIResponse[AcademicYearStats])
@require_staff()
async def get_year_stats(db: AsyncSession = Depends(get_db)):
    """Academic year counts."""
    service = get_academic_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)


@router.get("/years/current", response_model=APIResponse[AcademicYearResponse])
@require_authenticated()
async def get_current_year(db: AsyncSession = Depends(get_db)):
    """Get the school's current academic year."""
    service = get_academic_service()
    year = await service.get_current_year(db)
    if year is None:
        raise NotFoundException("Current academic year")

    return APIResponse(data=AcademicYearResponse.model_validate(year))


@router.get("/years/{year_id}", response_model=APIResponse[AcademicYearResponse])
@require_staff()
async def get_year(
    year_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an academic year."""
    service = get_academic_service()
    year = await service.get_year(db, year_id)

    return APIResponse(data=AcademicYearResponse.model_validate(year))


@router.patch("/years/{year_id}", response_model=APIResponse[AcademicYearResponse])
@require_school_admin()
async def update_year(
    year_id: uuid.UUID,
    data: AcademicYearUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an academic year."""
    service = get_academic_service()
    year = await service.update_year(db, year_id, data)
    await db.commit()

    return APIResponse(
        data=AcademicYearResponse.model_validate(year),
        message="Academic year updated successfully",
    )


@router.patch("/years/{year_id}/status", response_model=APIResponse[AcademicYearResponse])
@require_school_admin()
async def set_year_status(
    year_id: uuid.UUID,
    data: AcademicYearStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Move a year through draft, active, completed and archived."""
    service = get_academic_service()
    year = await service.set_status(db, year_id, data.status)
    await db.commit()

    return APIResponse(
        data=AcademicYearResponse.model_validate(year),
        message=f"Academic year marked {year.status}",
    )


@router.post("/years/{year_id}/set-current", response_model=APIResponse[AcademicYearResponse])
@require_school_admin()
async def set_current_year(
    year_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Make a year the school's current year."""
    service = get_academic_service()
    year = await service.set_current(db, year_id)
    await db.commit()

    return APIResponse(
        data=AcademicYearResponse.model_validate(year),
        message=f"{year.name} is now the current academic year",
    )


@router.delete("/years/{year_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_year(
    year_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an academic year that is not current."""
    service = get_academic_service()
    await service.delete_year(db, year_id)
    await db.commit()

    return APIResponse(message="Academic year deleted successfully")


# Terms

@router.get("/terms", response_model=APIResponse[list[AcademicTermResponse]])
@require_staff()
async def list_terms(
    academic_year_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List terms, optionally for one year."""
    service = get_academic_service()
    terms = await service.get_terms(db, academic_year_id=academic_year_id)

    return APIResponse(data=[AcademicTermResponse.model_validate(t) for t in terms])


@router.post("/terms", response_model=APIResponse[AcademicTermResponse], status_code=201)
@require_school_admin()
async def create_term(
    data: AcademicTermCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a term inside an academic year."""
    service = get_academic_service()
    term = await service.create_term(db, data)
    await db.commit()

    return APIResponse(
        data=AcademicTermResponse.model_validate(term),
        message="Term created successfully",
    )


@router.get("/terms/{term_id}", response_model=APIResponse[AcademicTermResponse])
@require_staff()
async def get_term(
    term_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a term."""
    service = get_academic_service()
    term = await service.get_term(db, term_id)

    return APIResponse(data=AcademicTermResponse.model_validate(term))


@router.patch("/terms/{term_id}", response_model=APIResponse[AcademicTermResponse])
@require_school_admin()
async def update_term(
    term_id: uuid.UUID,
    data: AcademicTermUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a term."""
    service = get_academic_service()
    term = await service.update_term(db, term_id, data)
    await db.commit()

    return APIResponse(
        data=AcademicTermResponse.model_validate(term),
        message="Term updated successfully",
    )


@router.delete("/terms/{term_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_term(
    term_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a term."""
    service = get_academic_service()
    await service.delete_term(db, term_id)
    await db.commit()

    return APIResponse(message="Term deleted successfully")
