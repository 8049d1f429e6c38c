"""Teacher service for CRUD operations."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException
from schoolbase.models import Teacher
from schoolbase.schemas.teacher import TeacherCreate, TeacherUpdate
from schoolbase.utils.school_context import get_school_id

logger = logging.getLogger(__name__)


class TeacherService:
    """Service for managing teacher records."""

    async def get_teachers(
        self,
        db: AsyncSession,
        subject: str | None = None,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Teacher], int]:
        """Get teachers with pagination and optional filters."""
        school_id = get_school_id()

        base_filter = [
            Teacher.school_id == school_id,
            Teacher.deleted_at.is_(None),
        ]

        if subject:
            base_filter.append(Teacher.subject == subject)
        if status:
            base_filter.append(Teacher.status == status)
        if search:
            search_term = f"%{search}%"
            base_filter.append(
                (Teacher.name.ilike(search_term))
                | (Teacher.teacher_code.ilike(search_term))
                | (Teacher.phone.ilike(search_term))
                | (Teacher.email.ilike(search_term))
            )

        # Count
        count_query = select(func.count(Teacher.id)).where(*base_filter)
        total = (await db.execute(count_query)).scalar() or 0

        # Fetch
        query = (
            select(Teacher)
            .where(*base_filter)
            .order_by(Teacher.name)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_teacher(self, db: AsyncSession, teacher_id: uuid.UUID) -> Teacher:
        """Get a single teacher by ID."""
        query = select(Teacher).where(
            Teacher.id == teacher_id,
            Teacher.school_id == get_school_id(),
            Teacher.deleted_at.is_(None),
        )
        result = await db.execute(query)
        teacher = result.scalar_one_or_none()

        if not teacher:
            raise NotFoundException("Teacher")

        return teacher

    async def create_teacher(self, db: AsyncSession, data: TeacherCreate) -> Teacher:
        """Create a new teacher record."""
        await self._check_code_available(db, data.teacher_code)

        teacher = Teacher(school_id=get_school_id(), **data.model_dump())

        db.add(teacher)
        await db.flush()
        await db.refresh(teacher)

        logger.info(f"Created teacher {teacher.teacher_code} ({teacher.id})")

        return teacher

    async def update_teacher(
        self, db: AsyncSession, teacher_id: uuid.UUID, data: TeacherUpdate
    ) -> Teacher:
        """Update a teacher record."""
        teacher = await self.get_teacher(db, teacher_id)

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("teacher_code") and update_data["teacher_code"] != teacher.teacher_code:
            await self._check_code_available(db, update_data["teacher_code"])

        for field, value in update_data.items():
            if value is None and not Teacher.__table__.c[field].nullable:
                continue
            setattr(teacher, field, value)

        await db.flush()
        await db.refresh(teacher)

        return teacher

    async def delete_teacher(self, db: AsyncSession, teacher_id: uuid.UUID) -> None:
        """Soft delete a teacher record."""
        teacher = await self.get_teacher(db, teacher_id)
        teacher.soft_delete()
        teacher.status = "inactive"
        await db.flush()

    async def _check_code_available(self, db: AsyncSession, teacher_code: str) -> None:
        existing = await db.execute(
            select(Teacher.id).where(
                Teacher.school_id == get_school_id(),
                Teacher.teacher_code == teacher_code,
                Teacher.deleted_at.is_(None),
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException(f"Teacher code '{teacher_code}' already exists")


def get_teacher_service() -> TeacherService:
    """Get teacher service instance."""
    return TeacherService()
