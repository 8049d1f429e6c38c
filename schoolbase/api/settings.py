"""School settings API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse
from schoolbase.schemas.settings import SchoolSettingsResponse, SchoolSettingsUpdate
from schoolbase.services.settings_service import get_settings_service
from schoolbase.utils.permissions import require_authenticated, require_school_admin

router = APIRouter()


@router.get("", response_model=APIResponse[SchoolSettingsResponse])
@require_authenticated()
async def get_school_settings(db: AsyncSession = Depends(get_db)):
    """Get the school's settings, creating defaults on first access."""
    service = get_settings_service()
    school_settings = await service.get_school_settings(db)
    await db.commit()

    return APIResponse(data=SchoolSettingsResponse.model_validate(school_settings))


@router.post("", response_model=APIResponse[SchoolSettingsResponse])
@require_school_admin()
async def save_school_settings(
    data: SchoolSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Save every settings field supplied."""
    service = get_settings_service()
    school_settings = await service.save_school_settings(db, data)
    await db.commit()

    return APIResponse(
        data=SchoolSettingsResponse.model_validate(school_settings),
        message="Settings saved successfully",
    )


@router.patch("/{section}", response_model=APIResponse[SchoolSettingsResponse])
@require_school_admin()
async def update_settings_section(
    section: str,
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Update one section: basic, details, branding or system."""
    service = get_settings_service()
    school_settings = await service.update_section(db, section, payload)
    await db.commit()

    return APIResponse(
        data=SchoolSettingsResponse.model_validate(school_settings),
        message=f"{section.capitalize()} settings updated successfully",
    )
