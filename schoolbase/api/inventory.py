"""Inventory API endpoints."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.inventory import MovementType, StockStatus
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.inventory import (
    InventoryStats,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    MovementCreate,
    MovementResponse,
)
from schoolbase.services.inventory_service import get_inventory_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("/items", response_model=APIResponse[list[ItemResponse]])
@require_staff()
async def list_items(
    category: str | None = None,
    stock_status: StockStatus | None = None,
    search: str | None = Query(None, description="Search by name, brand or serial number"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List inventory items."""
    service = get_inventory_service()
    items, total = await service.get_items(
        db,
        category=category,
        stock_status=stock_status.value if stock_status else None,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[ItemResponse.model_validate(i) for i in items],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("/items", response_model=APIResponse[ItemResponse], status_code=201)
@require_school_admin()
async def create_item(
    data: ItemCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add an inventory item."""
    service = get_inventory_service()
    item = await service.create_item(db, data)
    await db.commit()

    return APIResponse(
        data=ItemResponse.model_validate(item),
        message="Item created successfully",
    )


@router.get("/items/export")
@require_school_admin()
async def export_items(db: AsyncSession = Depends(get_db)):
    """Download every item as CSV."""
    service = get_inventory_service()
    content = await service.export_csv(db)

    filename = f"inventory-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/items/{item_id}", response_model=APIResponse[ItemResponse])
@require_staff()
async def get_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an inventory item."""
    service = get_inventory_service()
    item = await service.get_item(db, item_id)

    return APIResponse(data=ItemResponse.model_validate(item))


@router.patch("/items/{item_id}", response_model=APIResponse[ItemResponse])
@require_school_admin()
async def update_item(
    item_id: uuid.UUID,
    data: ItemUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an inventory item."""
    service = get_inventory_service()
    item = await service.update_item(db, item_id, data)
    await db.commit()

    return APIResponse(
        data=ItemResponse.model_validate(item),
        message="Item updated successfully",
    )


@router.delete("/items/{item_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an inventory item."""
    service = get_inventory_service()
    await service.delete_item(db, item_id)
    await db.commit()

    return APIResponse(message="Item deleted successfully")


@router.get("/movements", response_model=APIResponse[list[MovementResponse]])
@require_staff()
async def list_movements(
    item_id: uuid.UUID | None = None,
    type: MovementType | None = None,
    search: str | None = Query(None, description="Search by item name, reason or reference"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List stock movements, newest first."""
    service = get_inventory_service()
    movements, total = await service.get_movements(
        db,
        item_id=item_id,
        type=type.value if type else None,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=movements,
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("/movements", response_model=APIResponse[MovementResponse], status_code=201)
@require_staff()
async def record_movement(
    data: MovementCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record a stock movement and update the item's quantity."""
    service = get_inventory_service()
    movement, item = await service.record_movement(db, data)
    await db.commit()

    return APIResponse(
        data=movement,
        message=f"Stock updated: {item.name} now has {item.current_quantity} {item.unit}",
    )


@router.get("/stats", response_model=APIResponse[InventoryStats])
@require_staff()
async def get_inventory_stats(db: AsyncSession = Depends(get_db)):
    """Inventory headline numbers."""
    service = get_inventory_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)
