"""Settings service for school settings and per-user admin settings."""

import logging
import uuid
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.config import settings as app_settings
from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import AdminSettings, School, SchoolSettings
from schoolbase.schemas.settings import SETTINGS_SECTIONS, SchoolSettingsUpdate
from schoolbase.schemas.user import AdminSettingsUpdate
from schoolbase.utils.school_context import get_current_user_id, get_school_id

logger = logging.getLogger(__name__)


def build_default_settings(school: School) -> SchoolSettings:
    """Build a settings row seeded from the school record and platform defaults."""
    return SchoolSettings(
        school_id=school.id,
        name=school.name,
        address=school.address,
        email=school.email,
        phone=school.phone,
        website=school.website,
        principal_name=school.principal_name,
        establishment_year=school.established_year,
        timezone=app_settings.default_timezone,
        language=app_settings.default_language,
        currency=app_settings.default_currency,
    )


class SettingsService:
    """Service for reading and editing settings."""

    async def get_school_settings(self, db: AsyncSession) -> SchoolSettings:
        """Get the current school's settings, creating them on first access."""
        school_id = get_school_id()

        result = await db.execute(
            select(SchoolSettings).where(SchoolSettings.school_id == school_id)
        )
        row = result.scalar_one_or_none()
        if row is not None:
            return row

        school = await db.get(School, school_id)
        if not school or school.deleted_at is not None:
            raise NotFoundException("School")

        row = build_default_settings(school)
        db.add(row)
        await db.flush()
        await db.refresh(row)

        logger.info(f"Created default settings for school {school_id}")

        return row

    async def save_school_settings(
        self, db: AsyncSession, data: SchoolSettingsUpdate
    ) -> SchoolSettings:
        """Apply every provided settings field."""
        row = await self.get_school_settings(db)
        self._apply(row, data.model_dump(exclude_unset=True))

        await db.flush()
        await db.refresh(row)

        return row

    async def update_section(
        self, db: AsyncSession, section: str, payload: dict[str, Any]
    ) -> SchoolSettings:
        """Apply the fields of one settings section.

        Raises:
            ValidationException: If the section is unknown or the payload is invalid
        """
        schema = SETTINGS_SECTIONS.get(section)
        if schema is None:
            raise ValidationException(
                [{"field": "section", "message": f"Unknown settings section '{section}'"}],
                message="Invalid settings section",
            )

        try:
            data = schema.model_validate(payload)
        except ValidationError as e:
            raise ValidationException(
                [
                    {
                        "field": ".".join(str(p) for p in err["loc"]) or "general",
                        "message": err["msg"],
                    }
                    for err in e.errors()
                ],
                message="Invalid data",
            )

        row = await self.get_school_settings(db)
        self._apply(row, data.model_dump(exclude_unset=True))

        await db.flush()
        await db.refresh(row)

        return row

    async def get_admin_settings(self, db: AsyncSession) -> AdminSettings:
        """Get the current user's admin settings, creating them on first access."""
        user_id = get_current_user_id()

        result = await db.execute(
            select(AdminSettings).where(AdminSettings.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = AdminSettings(user_id=user_id)
            db.add(row)
            await db.flush()
            await db.refresh(row)

        return row

    async def update_admin_settings(
        self, db: AsyncSession, data: AdminSettingsUpdate
    ) -> AdminSettings:
        """Update the current user's admin settings."""
        row = await self.get_admin_settings(db)
        self._apply(row, data.model_dump(exclude_unset=True))

        await db.flush()
        await db.refresh(row)

        return row

    def _apply(self, row, values: dict[str, Any]) -> None:
        # Required columns cannot be cleared
        for field, value in values.items():
            if value is None and not row.__table__.c[field].nullable:
                continue
            setattr(row, field, value)


def get_settings_service() -> SettingsService:
    """Get settings service instance."""
    return SettingsService()
