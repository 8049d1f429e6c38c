"""Portal service: the student, parent and teacher views of the school."""

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ForbiddenException, NotFoundException
from schoolbase.models import CalendarEvent, ParentStudent, Student, Teacher, User
from schoolbase.schemas.dashboard import (
    ChildOverview,
    ClassCount,
    StudentFeesOverview,
    StudentLoansOverview,
    TeacherPortalStats,
)
from schoolbase.schemas.student import StudentResponse
from schoolbase.services.financial_service import get_financial_service
from schoolbase.services.library_service import get_library_service
from schoolbase.services.notification_service import get_notification_service
from schoolbase.utils.school_context import get_current_user_id, get_school_id

# Portals show a student's full history on one page
PORTAL_PAGE_SIZE = 500


class PortalService:
    """Service behind the self-service portals."""

    async def _current_user(self, db: AsyncSession) -> User:
        result = await db.execute(
            select(User).where(
                User.id == get_current_user_id(),
                User.school_id == get_school_id(),
                User.deleted_at.is_(None),
            )
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundException("User")
        return user

    async def _student(self, db: AsyncSession, student_id: uuid.UUID) -> Student:
        result = await db.execute(
            select(Student).where(
                Student.id == student_id,
                Student.school_id == get_school_id(),
                Student.deleted_at.is_(None),
            )
        )
        student = result.scalar_one_or_none()
        if not student:
            raise NotFoundException("Student")
        return student

    # Shared views

    async def get_fees_overview(self, db: AsyncSession, student_id: uuid.UUID) -> StudentFeesOverview:
        """A student's fees with totals."""
        financial = get_financial_service()
        fees, _ = await financial.get_student_fees(
            db, student_id=student_id, page_size=PORTAL_PAGE_SIZE
        )
        summary = await financial.get_fee_summary(db, student_id)

        return StudentFeesOverview(student_id=student_id, summary=summary, fees=fees)

    async def get_loans_overview(self, db: AsyncSession, student_id: uuid.UUID) -> StudentLoansOverview:
        """A student's library loans."""
        loans, _ = await get_library_service().get_borrowed_books(
            db, student_id=student_id, page_size=PORTAL_PAGE_SIZE
        )

        return StudentLoansOverview(
            student_id=student_id,
            active=sum(1 for loan in loans if loan.return_date is None),
            overdue=sum(1 for loan in loans if loan.status == "overdue"),
            loans=loans,
        )

    # Student portal

    async def get_own_student(self, db: AsyncSession) -> Student:
        """The student record linked to the current student account."""
        user = await self._current_user(db)
        if not user.student_id:
            raise NotFoundException("Student profile")
        return await self._student(db, user.student_id)

    # Parent portal

    async def get_children(self, db: AsyncSession) -> list[ChildOverview]:
        """Students linked to the current parent."""
        result = await db.execute(
            select(Student, ParentStudent)
            .join(ParentStudent, ParentStudent.student_id == Student.id)
            .where(
                ParentStudent.parent_id == get_current_user_id(),
                Student.school_id == get_school_id(),
                Student.deleted_at.is_(None),
            )
            .order_by(ParentStudent.is_primary.desc(), Student.name)
        )

        return [
            ChildOverview(
                student=StudentResponse.model_validate(student),
                relationship_type=link.relationship_type,
                is_primary=link.is_primary,
            )
            for student, link in result.all()
        ]

    async def get_child(self, db: AsyncSession, student_id: uuid.UUID) -> Student:
        """A student the current parent is linked to.

        Raises:
            ForbiddenException: If the student is not one of the parent's children
        """
        student = await self._student(db, student_id)

        link = await db.execute(
            select(ParentStudent.id).where(
                ParentStudent.parent_id == get_current_user_id(),
                ParentStudent.student_id == student.id,
            )
        )
        if link.scalar_one_or_none() is None:
            raise ForbiddenException("You can only view your own children")

        return student

    # Teacher portal

    async def get_own_teacher(self, db: AsyncSession) -> Teacher:
        """The teacher record linked to the current teacher account."""
        user = await self._current_user(db)
        if not user.teacher_id:
            raise NotFoundException("Teacher profile")

        result = await db.execute(
            select(Teacher).where(
                Teacher.id == user.teacher_id,
                Teacher.school_id == get_school_id(),
                Teacher.deleted_at.is_(None),
            )
        )
        teacher = result.scalar_one_or_none()
        if not teacher:
            raise NotFoundException("Teacher profile")
        return teacher

    async def get_teacher_stats(self, db: AsyncSession) -> TeacherPortalStats:
        """Class sizes and upcoming work for a teacher."""
        school_id = get_school_id()

        classes = await db.execute(
            select(Student.class_name, Student.section, func.count(Student.id))
            .where(
                Student.school_id == school_id,
                Student.deleted_at.is_(None),
                Student.status == "active",
            )
            .group_by(Student.class_name, Student.section)
            .order_by(Student.class_name, Student.section)
        )
        class_counts = [
            ClassCount(class_name=class_name, section=section, count=count)
            for class_name, section, count in classes.all()
        ]

        events = await db.execute(
            select(func.count(CalendarEvent.id)).where(
                CalendarEvent.school_id == school_id,
                CalendarEvent.deleted_at.is_(None),
                CalendarEvent.end_date >= date.today(),
            )
        )
        notifications = await get_notification_service().get_stats(db)

        return TeacherPortalStats(
            total_students=sum(c.count for c in class_counts),
            classes=class_counts,
            upcoming_events=events.scalar() or 0,
            unread_notifications=notifications.unread,
        )


def get_portal_service() -> PortalService:
    """Get portal service instance."""
    return PortalService()
