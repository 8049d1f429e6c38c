"""User service for managing the accounts of a school."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import Student, Teacher, User
from schoolbase.models.user import Role
from schoolbase.schemas.user import UserCreate
from schoolbase.utils.school_context import get_current_user_id, get_school_id
from schoolbase.utils.security import hash_password

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing users."""

    async def get_users(
        self,
        db: AsyncSession,
        role: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """Get users of the current school with pagination and optional filters."""
        school_id = get_school_id()

        base_filter = [
            User.school_id == school_id,
            User.deleted_at.is_(None),
        ]

        if role:
            base_filter.append(User.role == role)
        if search:
            search_term = f"%{search}%"
            base_filter.append(
                (User.first_name.ilike(search_term))
                | (User.last_name.ilike(search_term))
                | (User.email.ilike(search_term))
            )

        # Count
        count_query = select(func.count(User.id)).where(*base_filter)
        total = (await db.execute(count_query)).scalar() or 0

        # Fetch
        query = (
            select(User)
            .where(*base_filter)
            .order_by(User.first_name, User.last_name)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Get a single user of the current school by ID."""
        school_id = get_school_id()

        query = select(User).where(
            User.id == user_id,
            User.school_id == school_id,
            User.deleted_at.is_(None),
        )

        result = await db.execute(query)
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundException("User")

        return user

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        """Create a user account in the current school."""
        school_id = get_school_id()
        email = data.email.lower().strip()

        if data.role == Role.SUPER_ADMIN.value:
            raise ValidationException(
                [{"field": "role", "message": "Super admins cannot belong to a school"}],
                message="Invalid role",
            )

        # Check if email already exists in this school
        existing = await db.execute(
            select(User).where(
                User.school_id == school_id,
                User.email == email,
                User.deleted_at.is_(None),
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException("A user with this email already exists")

        if data.student_id:
            await self._ensure_in_school(db, Student, data.student_id, "Student")
        if data.teacher_id:
            await self._ensure_in_school(db, Teacher, data.teacher_id, "Teacher")

        user = User(
            school_id=school_id,
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            phone=data.phone.strip() if data.phone else None,
            role=data.role,
            student_id=data.student_id,
            teacher_id=data.teacher_id,
            is_active=True,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created {user.role} user {user.id} in school {school_id}")

        return user

    async def set_user_status(
        self, db: AsyncSession, user_id: uuid.UUID, is_active: bool
    ) -> User:
        """Activate or deactivate a user."""
        user = await self.get_user(db, user_id)

        if user.id == get_current_user_id() and not is_active:
            raise ValidationException("You cannot deactivate your own account")

        user.is_active = is_active
        await db.flush()
        await db.refresh(user)

        return user

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        """Soft delete a user."""
        user = await self.get_user(db, user_id)

        if user.id == get_current_user_id():
            raise ValidationException("You cannot delete your own account")

        user.soft_delete()
        user.is_active = False
        await db.flush()

    async def _ensure_in_school(self, db: AsyncSession, model, obj_id: uuid.UUID, name: str) -> None:
        result = await db.execute(
            select(model.id).where(
                model.id == obj_id,
                model.school_id == get_school_id(),
                model.deleted_at.is_(None),
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundException(name)


def get_user_service() -> UserService:
    """Get user service instance."""
    return UserService()
