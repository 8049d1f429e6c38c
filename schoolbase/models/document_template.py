"""Document template model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import JSONType, SchoolScopedModel


class DocumentTemplate(SchoolScopedModel):
    """A stored layout for a generated document (ID card, admit card, certificate...).

    The ``template`` and ``settings`` JSON are opaque to the backend; clients
    render them.
    """

    __tablename__ = "document_templates"
    __table_args__ = (
        Index(
            "idx_document_templates_school_type",
            "school_id",
            "type",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    category_bn: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    template: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    settings: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    required_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[str] = mapped_column(String(20), nullable=False, default="1.0")
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
