"""Academic service for academic years and terms."""

import logging
import uuid
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import AcademicTerm, AcademicYear
from schoolbase.models.academic import AcademicYearStatus
from schoolbase.schemas.academic import (
    AcademicTermCreate,
    AcademicTermUpdate,
    AcademicYearCreate,
    AcademicYearResponse,
    AcademicYearStats,
    AcademicYearUpdate,
)
from schoolbase.utils.school_context import get_school_id

logger = logging.getLogger(__name__)


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationException(
            [{"field": "end_date", "message": "end_date must be on or after start_date"}],
            message="Invalid date range",
        )


class AcademicService:
    """Service for the academic calendar."""

    # Academic years

    async def get_years(self, db: AsyncSession, status: str | None = None) -> list[AcademicYear]:
        """Get academic years, latest first."""
        query = select(AcademicYear).where(
            AcademicYear.school_id == get_school_id(),
            AcademicYear.deleted_at.is_(None),
        )
        if status:
            query = query.where(AcademicYear.status == status)

        result = await db.execute(query.order_by(AcademicYear.start_date.desc()))
        return list(result.scalars().all())

    async def get_year(self, db: AsyncSession, year_id: uuid.UUID) -> AcademicYear:
        """Get a single academic year by ID."""
        result = await db.execute(
            select(AcademicYear).where(
                AcademicYear.id == year_id,
                AcademicYear.school_id == get_school_id(),
                AcademicYear.deleted_at.is_(None),
            )
        )
        year = result.scalar_one_or_none()

        if not year:
            raise NotFoundException("Academic year")

        return year

    async def get_current_year(self, db: AsyncSession) -> AcademicYear | None:
        """Get the school's current academic year, if one is set."""
        result = await db.execute(
            select(AcademicYear).where(
                AcademicYear.school_id == get_school_id(),
                AcademicYear.deleted_at.is_(None),
                AcademicYear.is_current.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def create_year(self, db: AsyncSession, data: AcademicYearCreate) -> AcademicYear:
        """Create an academic year (never current on creation)."""
        year = AcademicYear(
            school_id=get_school_id(),
            is_current=False,
            is_active=data.status == AcademicYearStatus.ACTIVE.value,
            **data.model_dump(),
        )
        db.add(year)
        await db.flush()
        await db.refresh(year)

        return year

    async def update_year(
        self, db: AsyncSession, year_id: uuid.UUID, data: AcademicYearUpdate
    ) -> AcademicYear:
        """Update an academic year."""
        year = await self.get_year(db, year_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or AcademicYear.__table__.c[field].nullable
        }

        _check_range(
            update_data.get("start_date", year.start_date),
            update_data.get("end_date", year.end_date),
        )

        for field, value in update_data.items():
            setattr(year, field, value)

        await db.flush()
        await db.refresh(year)

        return year

    async def delete_year(self, db: AsyncSession, year_id: uuid.UUID) -> None:
        """Soft delete an academic year and its terms."""
        year = await self.get_year(db, year_id)

        if year.is_current:
            raise ConflictException("The current academic year cannot be deleted")

        terms = await db.execute(
            select(AcademicTerm).where(
                AcademicTerm.academic_year_id == year.id,
                AcademicTerm.deleted_at.is_(None),
            )
        )
        for term in terms.scalars().all():
            term.soft_delete()

        year.soft_delete()
        await db.flush()

    async def set_status(self, db: AsyncSession, year_id: uuid.UUID, status: str) -> AcademicYear:
        """Move a year through its lifecycle."""
        year = await self.get_year(db, year_id)

        if year.is_current and status in (
            AcademicYearStatus.COMPLETED.value,
            AcademicYearStatus.ARCHIVED.value,
        ):
            raise ConflictException("Set another year as current before closing this one")

        year.status = status
        year.is_active = status == AcademicYearStatus.ACTIVE.value

        await db.flush()
        await db.refresh(year)

        return year

    async def set_current(self, db: AsyncSession, year_id: uuid.UUID) -> AcademicYear:
        """Make a year the school's current year.

        All of the school's year rows are locked, the previous current year is
        cleared first and the chosen one is then activated, all within the
        request's transaction.
        """
        school_id = get_school_id()

        # Lock every year of the school so concurrent switches serialize
        await db.execute(
            select(AcademicYear.id)
            .where(AcademicYear.school_id == school_id)
            .with_for_update()
        )

        year = await self.get_year(db, year_id)
        if year.status == AcademicYearStatus.ARCHIVED.value:
            raise ValidationException("An archived academic year cannot be made current")

        await db.execute(
            update(AcademicYear)
            .where(
                AcademicYear.school_id == school_id,
                AcademicYear.is_current.is_(True),
                AcademicYear.id != year.id,
            )
            .values(is_current=False)
            .execution_options(synchronize_session="fetch")
        )

        year.is_current = True
        year.is_active = True
        year.status = AcademicYearStatus.ACTIVE.value

        await db.flush()
        await db.refresh(year)

        logger.info(f"Academic year {year.id} ({year.name}) is now current for school {school_id}")

        return year

    async def get_stats(self, db: AsyncSession) -> AcademicYearStats:
        """Counts of years and terms."""
        school_id = get_school_id()

        years = await self.get_years(db)
        terms = await db.execute(
            select(func.count(AcademicTerm.id)).where(
                AcademicTerm.school_id == school_id,
                AcademicTerm.deleted_at.is_(None),
            )
        )
        current = next((y for y in years if y.is_current), None)

        return AcademicYearStats(
            total_years=len(years),
            active_years=sum(1 for y in years if y.status == AcademicYearStatus.ACTIVE.value),
            completed_years=sum(1 for y in years if y.status == AcademicYearStatus.COMPLETED.value),
            total_terms=terms.scalar() or 0,
            current_year=AcademicYearResponse.model_validate(current) if current else None,
        )

    # Terms

    async def get_terms(
        self, db: AsyncSession, academic_year_id: uuid.UUID | None = None
    ) -> list[AcademicTerm]:
        """Get terms, optionally for one year, in date order."""
        query = select(AcademicTerm).where(
            AcademicTerm.school_id == get_school_id(),
            AcademicTerm.deleted_at.is_(None),
        )
        if academic_year_id:
            query = query.where(AcademicTerm.academic_year_id == academic_year_id)

        result = await db.execute(query.order_by(AcademicTerm.start_date))
        return list(result.scalars().all())

    async def get_term(self, db: AsyncSession, term_id: uuid.UUID) -> AcademicTerm:
        """Get a single term by ID."""
        result = await db.execute(
            select(AcademicTerm).where(
                AcademicTerm.id == term_id,
                AcademicTerm.school_id == get_school_id(),
                AcademicTerm.deleted_at.is_(None),
            )
        )
        term = result.scalar_one_or_none()

        if not term:
            raise NotFoundException("Academic term")

        return term

    async def create_term(self, db: AsyncSession, data: AcademicTermCreate) -> AcademicTerm:
        """Create a term inside an academic year."""
        year = await self.get_year(db, data.academic_year_id)
        self._check_within_year(year, data.start_date, data.end_date)

        term = AcademicTerm(school_id=year.school_id, **data.model_dump())
        db.add(term)
        await db.flush()
        await db.refresh(term)

        return term

    async def update_term(
        self, db: AsyncSession, term_id: uuid.UUID, data: AcademicTermUpdate
    ) -> AcademicTerm:
        """Update a term."""
        term = await self.get_term(db, term_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or AcademicTerm.__table__.c[field].nullable
        }

        start = update_data.get("start_date", term.start_date)
        end = update_data.get("end_date", term.end_date)
        _check_range(start, end)
        year = await self.get_year(db, term.academic_year_id)
        self._check_within_year(year, start, end)

        for field, value in update_data.items():
            setattr(term, field, value)

        await db.flush()
        await db.refresh(term)

        return term

    async def delete_term(self, db: AsyncSession, term_id: uuid.UUID) -> None:
        """Soft delete a term."""
        term = await self.get_term(db, term_id)
        term.soft_delete()
        await db.flush()

    def _check_within_year(self, year: AcademicYear, start: date, end: date) -> None:
        if start < year.start_date or end > year.end_date:
            raise ValidationException(
                [{"field": "start_date", "message": "Term must fall within its academic year"}],
                message="Term must fall within its academic year",
            )


def get_academic_service() -> AcademicService:
    """Get academic service instance."""
    return AcademicService()
