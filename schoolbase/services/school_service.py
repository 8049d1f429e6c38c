"""School service for CRUD operations (Super Admin only)."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException
from schoolbase.models import InventoryItem, LibraryBook, School, Student, Teacher, User
from schoolbase.models.user import Role
from schoolbase.schemas.school import SchoolCreate, SchoolStats, SchoolUpdate
from schoolbase.services.settings_service import build_default_settings
from schoolbase.utils.security import hash_password

logger = logging.getLogger(__name__)


class SchoolService:
    """Service for managing schools."""

    async def get_schools(
        self,
        db: AsyncSession,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[School], int]:
        """Get list of schools with optional filters."""
        query = select(School).where(School.deleted_at.is_(None))

        # Apply filters
        if is_active is not None:
            query = query.where(School.is_active == is_active)
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (School.name.ilike(search_term))
                | (School.email.ilike(search_term))
                | (School.slug.ilike(search_term))
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        # Apply pagination and ordering
        query = query.order_by(School.created_at.desc(), School.name)
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        schools = list(result.scalars().all())

        return schools, total

    async def get_school(self, db: AsyncSession, school_id: uuid.UUID) -> School:
        """Get a school by ID."""
        query = select(School).where(
            School.id == school_id,
            School.deleted_at.is_(None),
        )
        result = await db.execute(query)
        school = result.scalar_one_or_none()

        if not school:
            raise NotFoundException("School")

        return school

    async def get_school_by_slug(self, db: AsyncSession, slug: str) -> School | None:
        """Get a school by slug (including soft-deleted, since slugs stay reserved)."""
        query = select(School).where(School.slug == slug)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_school(self, db: AsyncSession, data: SchoolCreate) -> School:
        """Create a school, its settings row and optionally its first admin."""
        if await self.get_school_by_slug(db, data.slug):
            raise ConflictException(f"A school with slug '{data.slug}' already exists")

        school = School(
            name=data.name,
            slug=data.slug,
            address=data.address,
            phone=data.phone,
            email=data.email,
            website=data.website,
            principal_name=data.principal_name,
            established_year=data.established_year,
            is_active=True,
        )
        db.add(school)
        await db.flush()

        db.add(build_default_settings(school))

        if data.admin:
            db.add(User(
                school_id=school.id,
                email=data.admin.email.lower(),
                password_hash=hash_password(data.admin.password),
                first_name=data.admin.first_name,
                last_name=data.admin.last_name,
                phone=data.admin.phone,
                role=Role.SCHOOL_ADMIN.value,
                is_active=True,
            ))

        await db.flush()
        await db.refresh(school)

        logger.info(f"Created school {school.slug} ({school.id})")

        return school

    async def update_school(
        self, db: AsyncSession, school_id: uuid.UUID, data: SchoolUpdate
    ) -> School:
        """Update a school."""
        school = await self.get_school(db, school_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not School.__table__.c[field].nullable:
                continue
            setattr(school, field, value)

        await db.flush()
        await db.refresh(school)

        return school

    async def delete_school(self, db: AsyncSession, school_id: uuid.UUID) -> None:
        """Soft delete a school and deactivate it."""
        school = await self.get_school(db, school_id)
        school.soft_delete()
        school.is_active = False
        await db.flush()

        logger.info(f"Deleted school {school.slug} ({school.id})")

    async def get_school_stats(self, db: AsyncSession, school_id: uuid.UUID) -> SchoolStats:
        """Get headline counts for a school."""
        await self.get_school(db, school_id)

        async def count(model) -> int:
            result = await db.execute(
                select(func.count(model.id)).where(
                    model.school_id == school_id,
                    model.deleted_at.is_(None),
                )
            )
            return result.scalar() or 0

        return SchoolStats(
            school_id=school_id,
            total_users=await count(User),
            total_students=await count(Student),
            total_teachers=await count(Teacher),
            total_books=await count(LibraryBook),
            total_inventory_items=await count(InventoryItem),
        )


def get_school_service() -> SchoolService:
    """Get school service instance."""
    return SchoolService()
