"""Dashboard API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.schemas.common import APIResponse
from schoolbase.schemas.dashboard import DashboardStats
from schoolbase.services.dashboard_service import get_dashboard_service
from schoolbase.utils.permissions import require_staff

router = APIRouter()


@router.get("/stats", response_model=APIResponse[DashboardStats])
@require_staff()
async def get_dashboard_stats(db: AsyncSession = Depends(get_db)):
    """Headline numbers for the current school."""
    service = get_dashboard_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)
