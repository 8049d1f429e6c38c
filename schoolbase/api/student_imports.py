"""Student import API endpoints."""

import uuid

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.student_import import ImportFieldInfo, StudentImportResponse
from schoolbase.services.student_import_service import (
    IMPORT_FIELDS,
    build_template,
    get_student_import_service,
)
from schoolbase.utils.permissions import require_school_admin

router = APIRouter()


@router.get("/fields", response_model=APIResponse[list[ImportFieldInfo]])
@require_school_admin()
async def get_import_fields():
    """Columns recognised in an import file."""
    return APIResponse(
        data=[
            ImportFieldInfo(name=name, label=info["label"], required=info["required"])
            for name, info in IMPORT_FIELDS.items()
        ]
    )


@router.get("/template")
@require_school_admin()
async def download_template():
    """A CSV template with every column and an example row."""
    return Response(
        content=build_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="student-import-template.csv"'},
    )


@router.post("", response_model=APIResponse[StudentImportResponse], status_code=201)
@require_school_admin()
async def import_students(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """Upload a CSV of students. Invalid rows are skipped and listed on the batch."""
    service = get_student_import_service()
    content = await file.read()
    batch = await service.import_students(db, file.filename or "", content)
    await db.commit()

    return APIResponse(
        data=StudentImportResponse.model_validate(batch),
        message=(
            f"Import completed: {batch.successful_imports} imported, "
            f"{batch.failed_imports} failed"
        ),
    )


@router.get("/history", response_model=APIResponse[list[StudentImportResponse]])
@require_school_admin()
async def list_imports(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Past imports, newest first."""
    service = get_student_import_service()
    batches, total = await service.get_batches(db, page=page, page_size=page_size)

    return APIResponse(
        data=[StudentImportResponse.model_validate(b) for b in batches],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.get("/{batch_id}", response_model=APIResponse[StudentImportResponse])
@require_school_admin()
async def get_import(
    batch_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an import batch with its row errors."""
    service = get_student_import_service()
    batch = await service.get_batch(db, batch_id)

    return APIResponse(data=StudentImportResponse.model_validate(batch))
