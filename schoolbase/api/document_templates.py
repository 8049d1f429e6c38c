"""Document template API endpoints."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse
from schoolbase.schemas.document_template import (
    TemplateCreate,
    TemplateResponse,
    TemplateStats,
    TemplateUpdate,
)
from schoolbase.services.document_template_service import get_document_template_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[TemplateResponse]])
@require_staff()
async def list_templates(
    type: str | None = None,
    category: str | None = None,
    is_active: bool | None = None,
    favorites_only: bool = False,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List document templates."""
    service = get_document_template_service()
    templates = await service.get_templates(
        db,
        type=type,
        category=category,
        is_active=is_active,
        favorites_only=favorites_only,
        search=search,
    )

    return APIResponse(data=[TemplateResponse.model_validate(t) for t in templates])


@router.post("", response_model=APIResponse[TemplateResponse], status_code=201)
@require_school_admin()
async def create_template(
    data: TemplateCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a document template."""
    service = get_document_template_service()
    template = await service.create_template(db, data)
    await db.commit()

    return APIResponse(
        data=TemplateResponse.model_validate(template),
        message="Template created successfully",
    )


@router.get("/stats", response_model=APIResponse[TemplateStats])
@require_staff()
async def get_template_stats(db: AsyncSession = Depends(get_db)):
    """Template usage numbers."""
    service = get_document_template_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)


@router.get("/{template_id}", response_model=APIResponse[TemplateResponse])
@require_staff()
async def get_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a document template."""
    service = get_document_template_service()
    template = await service.get_template(db, template_id)

    return APIResponse(data=TemplateResponse.model_validate(template))


@router.patch("/{template_id}", response_model=APIResponse[TemplateResponse])
@require_school_admin()
async def update_template(
    template_id: uuid.UUID,
    data: TemplateUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a document template."""
    service = get_document_template_service()
    template = await service.update_template(db, template_id, data)
    await db.commit()

    return APIResponse(
        data=TemplateResponse.model_validate(template),
        message="Template updated successfully",
    )


@router.delete("/{template_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a document template."""
    service = get_document_template_service()
    await service.delete_template(db, template_id)
    await db.commit()

    return APIResponse(message="Template deleted successfully")


@router.post("/{template_id}/favorite", response_model=APIResponse[TemplateResponse])
@require_staff()
async def toggle_favorite(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Flip a template's favorite flag."""
    service = get_document_template_service()
    template = await service.toggle_favorite(db, template_id)
    await db.commit()

    return APIResponse(data=TemplateResponse.model_validate(template))


@router.post("/{template_id}/use", response_model=APIResponse[TemplateResponse])
@require_staff()
async def record_usage(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Count one use of a template."""
    service = get_document_template_service()
    template = await service.record_usage(db, template_id)
    await db.commit()

    return APIResponse(data=TemplateResponse.model_validate(template))
