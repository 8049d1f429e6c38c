"""Student service for CRUD operations and parent links."""

import logging
import uuid
from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import ParentStudent, Student, User
from schoolbase.models.user import Role
from schoolbase.schemas.student import LinkParentRequest, StudentCreate, StudentUpdate
from schoolbase.utils.school_context import get_school_id

logger = logging.getLogger(__name__)


class StudentService:
    """Service for managing students."""

    async def get_students(
        self,
        db: AsyncSession,
        class_name: str | None = None,
        section: str | None = None,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Student], int]:
        """Get list of students with optional filters."""
        school_id = get_school_id()

        query = select(Student).where(
            Student.school_id == school_id,
            Student.deleted_at.is_(None),
        )

        # Apply filters
        if class_name:
            query = query.where(Student.class_name == class_name)
        if section:
            query = query.where(Student.section == section)
        if status:
            query = query.where(Student.status == status)
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (Student.name.ilike(search_term))
                | (Student.name_bn.ilike(search_term))
                | (Student.student_code.ilike(search_term))
                | (Student.phone.ilike(search_term))
                | (Student.guardian_phone.ilike(search_term))
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        # Apply pagination
        query = query.order_by(Student.class_name, Student.section, Student.roll_number, Student.name)
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        students = list(result.scalars().all())

        return students, total

    async def get_student(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
    ) -> Student:
        """Get a single student by ID."""
        school_id = get_school_id()

        query = select(Student).where(
            Student.id == student_id,
            Student.school_id == school_id,
            Student.deleted_at.is_(None),
        )

        result = await db.execute(query)
        student = result.scalar_one_or_none()

        if not student:
            raise NotFoundException("Student")

        return student

    async def create_student(
        self,
        db: AsyncSession,
        data: StudentCreate,
    ) -> Student:
        """Create a new student."""
        school_id = get_school_id()

        await self._check_code_available(db, data.student_code)

        values = data.model_dump()
        if not values.get("admission_date"):
            values["admission_date"] = date.today()

        student = Student(school_id=school_id, **values)

        db.add(student)
        await db.flush()
        await db.refresh(student)

        logger.info(f"Created student {student.student_code} ({student.id})")

        return student

    async def update_student(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        data: StudentUpdate,
    ) -> Student:
        """Update a student."""
        student = await self.get_student(db, student_id)

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("student_code") and update_data["student_code"] != student.student_code:
            await self._check_code_available(db, update_data["student_code"])

        for field, value in update_data.items():
            if value is None and not Student.__table__.c[field].nullable:
                continue
            setattr(student, field, value)

        await db.flush()
        await db.refresh(student)

        return student

    async def delete_student(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
    ) -> None:
        """Soft delete a student."""
        student = await self.get_student(db, student_id)

        student.soft_delete()
        student.status = "inactive"

        await db.flush()

    async def get_student_parents(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
    ) -> list[tuple[User, ParentStudent]]:
        """Get parents linked to a student."""
        student = await self.get_student(db, student_id)

        query = (
            select(User, ParentStudent)
            .join(ParentStudent, ParentStudent.parent_id == User.id)
            .where(
                ParentStudent.student_id == student.id,
                User.deleted_at.is_(None),
            )
            .order_by(ParentStudent.is_primary.desc(), User.first_name)
        )
        result = await db.execute(query)

        return [(row[0], row[1]) for row in result.all()]

    async def link_parent(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        data: LinkParentRequest,
    ) -> tuple[User, ParentStudent]:
        """Link a parent account to a student."""
        student = await self.get_student(db, student_id)

        parent_result = await db.execute(
            select(User).where(
                User.id == data.parent_id,
                User.school_id == student.school_id,
                User.deleted_at.is_(None),
            )
        )
        parent = parent_result.scalar_one_or_none()
        if not parent:
            raise NotFoundException("Parent")
        if parent.role != Role.PARENT.value:
            raise ValidationException(
                [{"field": "parent_id", "message": "User is not a parent"}],
                message="User is not a parent",
            )

        existing = await db.execute(
            select(ParentStudent).where(
                ParentStudent.parent_id == parent.id,
                ParentStudent.student_id == student.id,
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException("Parent is already linked to this student")

        link = ParentStudent(
            parent_id=parent.id,
            student_id=student.id,
            relationship_type=data.relationship_type,
            is_primary=data.is_primary,
        )
        db.add(link)
        await db.flush()

        return parent, link

    async def unlink_parent(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        parent_id: uuid.UUID,
    ) -> None:
        """Remove a parent link from a student."""
        student = await self.get_student(db, student_id)

        result = await db.execute(
            delete(ParentStudent).where(
                ParentStudent.student_id == student.id,
                ParentStudent.parent_id == parent_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundException("Parent link")

    async def _check_code_available(self, db: AsyncSession, student_code: str) -> None:
        existing = await db.execute(
            select(Student.id).where(
                Student.school_id == get_school_id(),
                Student.student_code == student_code,
                Student.deleted_at.is_(None),
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException(f"Student code '{student_code}' already exists")


def get_student_service() -> StudentService:
    """Get student service instance."""
    return StudentService()
