"""School admin API routes: users and the admin's own settings."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.user import Role
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.dashboard import DashboardStats
from schoolbase.schemas.user import (
    AdminSettingsResponse,
    AdminSettingsUpdate,
    UserCreate,
    UserResponse,
    UserStatusUpdate,
)
from schoolbase.services.dashboard_service import get_dashboard_service
from schoolbase.services.settings_service import get_settings_service
from schoolbase.services.user_service import get_user_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("/users", response_model=APIResponse[list[UserResponse]])
@require_school_admin()
async def list_users(
    role: Role | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List users of the current school."""
    service = get_user_service()
    users, total = await service.get_users(
        db,
        role=role.value if role else None,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[UserResponse.model_validate(u) for u in users],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("/users", response_model=APIResponse[UserResponse], status_code=201)
@require_school_admin()
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a user in the current school."""
    service = get_user_service()
    user = await service.create_user(db, data)
    await db.commit()

    return APIResponse(
        data=UserResponse.model_validate(user),
        message="User created successfully",
    )


@router.get("/users/{user_id}", response_model=APIResponse[UserResponse])
@require_school_admin()
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a user."""
    service = get_user_service()
    user = await service.get_user(db, user_id)

    return APIResponse(data=UserResponse.model_validate(user))


@router.patch("/users/{user_id}/status", response_model=APIResponse[UserResponse])
@require_school_admin()
async def set_user_status(
    user_id: uuid.UUID,
    data: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Activate or deactivate a user."""
    service = get_user_service()
    user = await service.set_user_status(db, user_id, data.is_active)
    await db.commit()

    state = "activated" if user.is_active else "deactivated"
    return APIResponse(
        data=UserResponse.model_validate(user),
        message=f"User {state} successfully",
    )


@router.delete("/users/{user_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Soft delete a user."""
    service = get_user_service()
    await service.delete_user(db, user_id)
    await db.commit()

    return APIResponse(message="User deleted successfully")


@router.get("/admin/settings", response_model=APIResponse[AdminSettingsResponse])
@require_staff()
async def get_admin_settings(db: AsyncSession = Depends(get_db)):
    """Get the caller's admin settings, creating defaults on first access."""
    service = get_settings_service()
    admin_settings = await service.get_admin_settings(db)
    await db.commit()

    return APIResponse(data=AdminSettingsResponse.model_validate(admin_settings))


@router.patch("/admin/settings", response_model=APIResponse[AdminSettingsResponse])
@require_staff()
async def update_admin_settings(
    data: AdminSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's admin settings."""
    service = get_settings_service()
    admin_settings = await service.update_admin_settings(db, data)
    await db.commit()

    return APIResponse(
        data=AdminSettingsResponse.model_validate(admin_settings),
        message="Settings updated successfully",
    )


@router.get("/school-admin/dashboard", response_model=APIResponse[DashboardStats])
@require_school_admin()
async def get_school_admin_dashboard(db: AsyncSession = Depends(get_db)):
    """Dashboard numbers for the school admin."""
    service = get_dashboard_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)
