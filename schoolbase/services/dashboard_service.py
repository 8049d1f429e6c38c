"""Dashboard service aggregating school-wide counts."""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.models import (
    CalendarEvent,
    StudentFee,
    Student,
    Teacher,
    TransportRoute,
)
from schoolbase.models.financial import FeeStatus
from schoolbase.models.student import StudentStatus
from schoolbase.schemas.dashboard import DashboardStats
from schoolbase.services.financial_service import get_financial_service
from schoolbase.services.inventory_service import get_inventory_service
from schoolbase.services.library_service import get_library_service
from schoolbase.services.notification_service import get_notification_service
from schoolbase.utils.money import to_money
from schoolbase.utils.school_context import get_school_id


class DashboardService:
    """Service for dashboard numbers."""

    async def _count(self, db: AsyncSession, model, *conditions) -> int:
        result = await db.execute(
            select(func.count(model.id)).where(
                model.school_id == get_school_id(),
                model.deleted_at.is_(None),
                *conditions,
            )
        )
        return result.scalar() or 0

    async def get_stats(self, db: AsyncSession) -> DashboardStats:
        """Headline numbers for the current school."""
        today = date.today()

        library = await get_library_service().get_stats(db)
        inventory = await get_inventory_service().get_stats(db)
        month = await get_financial_service().get_summary(
            db, start_date=today.replace(day=1), end_date=today
        )
        notifications = await get_notification_service().get_stats(db)

        open_fees = await db.execute(
            select(
                func.count(StudentFee.id),
                func.sum(StudentFee.amount_due - StudentFee.amount_paid),
            ).where(
                StudentFee.school_id == get_school_id(),
                StudentFee.deleted_at.is_(None),
                StudentFee.status.in_((
                    FeeStatus.PENDING.value,
                    FeeStatus.PARTIAL.value,
                    FeeStatus.OVERDUE.value,
                )),
            )
        )
        pending_fees, pending_amount = open_fees.one()

        return DashboardStats(
            total_students=await self._count(db, Student),
            active_students=await self._count(
                db, Student, Student.status == StudentStatus.ACTIVE.value
            ),
            total_teachers=await self._count(db, Teacher),
            total_books=library.total_books,
            borrowed_books=library.active_loans,
            overdue_books=library.overdue_loans,
            inventory_items=inventory.total_items,
            low_stock_items=inventory.low_stock_items + inventory.out_of_stock_items,
            transport_routes=await self._count(db, TransportRoute),
            pending_fees=pending_fees or 0,
            pending_fee_amount=to_money(pending_amount),
            monthly_income=month.total_income,
            monthly_expense=month.total_expense,
            upcoming_events=await self._count(
                db, CalendarEvent, CalendarEvent.end_date >= today
            ),
            unread_notifications=notifications.unread,
        )


def get_dashboard_service() -> DashboardService:
    """Get dashboard service instance."""
    return DashboardService()
