"""Notification API endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse, CountResponse, PaginationMeta
from schoolbase.schemas.notification import (
    MarkReadRequest,
    NotificationCreate,
    NotificationResponse,
    NotificationStats,
)
from schoolbase.services.notification_service import get_notification_service
from schoolbase.utils.permissions import require_authenticated, require_staff

router = APIRouter()


@router.get("", response_model=APIResponse[list[NotificationResponse]])
@require_authenticated()
async def list_notifications(
    unread_only: bool = False,
    category: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Notifications visible to the caller, newest first."""
    service = get_notification_service()
    notifications, total = await service.get_notifications(
        db,
        unread_only=unread_only,
        category=category,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("", response_model=APIResponse[NotificationResponse], status_code=201)
@require_staff()
async def create_notification(
    data: NotificationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Send a notification to one user or the whole school."""
    service = get_notification_service()
    notification = await service.create_notification(db, data)
    await db.commit()

    return APIResponse(
        data=NotificationResponse.model_validate(notification),
        message="Notification sent successfully",
    )


@router.get("/stats", response_model=APIResponse[NotificationStats])
@require_authenticated()
async def get_notification_stats(db: AsyncSession = Depends(get_db)):
    """Notification counts for the caller."""
    service = get_notification_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)


@router.post("/mark-read", response_model=APIResponse[CountResponse])
@require_authenticated()
async def mark_read(
    data: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
):
    """Mark several notifications read."""
    service = get_notification_service()
    count = await service.mark_as_read(db, data.notification_ids)
    await db.commit()

    return APIResponse(
        data=CountResponse(count=count),
        message=f"{count} notification(s) marked as read",
    )


@router.post("/{notification_id}/read", response_model=APIResponse[NotificationResponse])
@require_authenticated()
async def mark_one_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Mark one notification read."""
    service = get_notification_service()
    notification = await service.mark_one_as_read(db, notification_id)
    await db.commit()

    return APIResponse(data=NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}", response_model=APIResponse[None])
@require_authenticated()
async def delete_notification(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a notification."""
    service = get_notification_service()
    await service.delete_notification(db, notification_id)
    await db.commit()

    return APIResponse(message="Notification deleted successfully")
