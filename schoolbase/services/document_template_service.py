"""Document template service."""

import uuid

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException
from schoolbase.models import DocumentTemplate
from schoolbase.models.base import utcnow
from schoolbase.schemas.document_template import TemplateCreate, TemplateStats, TemplateUpdate
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

# Templates used at least this often count as popular
POPULAR_USAGE_THRESHOLD = 10


class DocumentTemplateService:
    """Service for document templates."""

    async def get_templates(
        self,
        db: AsyncSession,
        type: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
        favorites_only: bool = False,
        search: str | None = None,
    ) -> list[DocumentTemplate]:
        """Get templates; favorites and most used first."""
        query = select(DocumentTemplate).where(
            DocumentTemplate.school_id == get_school_id(),
            DocumentTemplate.deleted_at.is_(None),
        )
        if type:
            query = query.where(DocumentTemplate.type == type)
        if category:
            query = query.where(DocumentTemplate.category == category)
        if is_active is not None:
            query = query.where(DocumentTemplate.is_active == is_active)
        if favorites_only:
            query = query.where(DocumentTemplate.is_favorite.is_(True))
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (DocumentTemplate.name.ilike(search_term))
                | (DocumentTemplate.name_bn.ilike(search_term))
                | (DocumentTemplate.description.ilike(search_term))
            )

        result = await db.execute(
            query.order_by(
                DocumentTemplate.is_favorite.desc(),
                DocumentTemplate.usage_count.desc(),
                DocumentTemplate.name,
            )
        )
        return list(result.scalars().all())

    async def get_template(
        self, db: AsyncSession, template_id: uuid.UUID, for_update: bool = False
    ) -> DocumentTemplate:
        """Get a single template by ID."""
        query = select(DocumentTemplate).where(
            DocumentTemplate.id == template_id,
            DocumentTemplate.school_id == get_school_id(),
            DocumentTemplate.deleted_at.is_(None),
        )
        if for_update:
            query = query.with_for_update()

        result = await db.execute(query)
        template = result.scalar_one_or_none()

        if not template:
            raise NotFoundException("Template")

        return template

    async def create_template(self, db: AsyncSession, data: TemplateCreate) -> DocumentTemplate:
        """Create a template; a new default replaces the old default of its type."""
        school_id = get_school_id()

        if data.is_default:
            await self._clear_default(db, data.type)

        template = DocumentTemplate(
            school_id=school_id,
            created_by=get_current_user_id_or_none(),
            **data.model_dump(),
        )
        db.add(template)
        await db.flush()
        await db.refresh(template)

        return template

    async def update_template(
        self, db: AsyncSession, template_id: uuid.UUID, data: TemplateUpdate
    ) -> DocumentTemplate:
        """Update a template."""
        template = await self.get_template(db, template_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or DocumentTemplate.__table__.c[field].nullable
        }

        if update_data.get("is_default"):
            await self._clear_default(db, update_data.get("type", template.type), exclude_id=template.id)

        for field, value in update_data.items():
            setattr(template, field, value)

        await db.flush()
        await db.refresh(template)

        return template

    async def delete_template(self, db: AsyncSession, template_id: uuid.UUID) -> None:
        """Soft delete a template."""
        template = await self.get_template(db, template_id)
        template.soft_delete()
        await db.flush()

    async def toggle_favorite(self, db: AsyncSession, template_id: uuid.UUID) -> DocumentTemplate:
        """Flip a template's favorite flag."""
        template = await self.get_template(db, template_id)
        template.is_favorite = not template.is_favorite

        await db.flush()
        await db.refresh(template)

        return template

    async def record_usage(self, db: AsyncSession, template_id: uuid.UUID) -> DocumentTemplate:
        """Count one use of a template."""
        template = await self.get_template(db, template_id, for_update=True)
        template.usage_count = (template.usage_count or 0) + 1
        template.last_used_at = utcnow()

        await db.flush()
        await db.refresh(template)

        return template

    async def get_stats(self, db: AsyncSession) -> TemplateStats:
        """Template usage numbers."""
        query = select(
            func.count(DocumentTemplate.id),
            func.count(case((DocumentTemplate.is_active.is_(True), DocumentTemplate.id))),
            func.count(
                case((DocumentTemplate.usage_count >= POPULAR_USAGE_THRESHOLD, DocumentTemplate.id))
            ),
            func.coalesce(func.sum(DocumentTemplate.usage_count), 0),
            func.count(case((DocumentTemplate.is_favorite.is_(True), DocumentTemplate.id))),
        ).where(
            DocumentTemplate.school_id == get_school_id(),
            DocumentTemplate.deleted_at.is_(None),
        )
        total, active, popular, usage, favorites = (await db.execute(query)).one()

        return TemplateStats(
            total=total or 0,
            active=active or 0,
            popular=popular or 0,
            total_usage=int(usage),
            favorites=favorites or 0,
        )

    async def _clear_default(
        self, db: AsyncSession, type: str, exclude_id: uuid.UUID | None = None
    ) -> None:
        stmt = update(DocumentTemplate).where(
            DocumentTemplate.school_id == get_school_id(),
            DocumentTemplate.type == type,
            DocumentTemplate.is_default.is_(True),
        )
        if exclude_id:
            stmt = stmt.where(DocumentTemplate.id != exclude_id)
        await db.execute(stmt.values(is_default=False).execution_options(synchronize_session="fetch"))


def get_document_template_service() -> DocumentTemplateService:
    """Get document template service instance."""
    return DocumentTemplateService()
