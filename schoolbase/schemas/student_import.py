"""Student import schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ImportRowError(BaseModel):
    """Why one row of the file was skipped."""

    row: int
    message: str


class ImportFieldInfo(BaseModel):
    """A recognised column of the import file."""

    name: str
    label: str
    required: bool = False


class StudentImportResponse(BaseModel):
    """Schema for an import batch."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    file_name: str
    file_size: int
    total_records: int
    successful_imports: int
    failed_imports: int
    status: str
    errors: list[ImportRowError]
    uploaded_by: uuid.UUID | None
    completed_at: datetime | None
    created_at: datetime
