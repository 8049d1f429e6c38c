"""Student CSV import batch model."""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import JSONType, SchoolScopedModel


class ImportStatus(str, Enum):
    """Import batch status."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class StudentImportBatch(SchoolScopedModel):
    """One uploaded student file and the outcome of each of its rows."""

    __tablename__ = "student_import_batches"
    __table_args__ = (Index("idx_student_imports_school_created", "school_id", "created_at"),)

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # bytes
    total_records: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_imports: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_imports: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ImportStatus.PROCESSING.value
    )
    # [{"row": 3, "message": "..."}], row numbers as shown in a spreadsheet
    errors: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
