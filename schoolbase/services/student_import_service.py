"""Bulk student import from CSV files."""

import csv
import io
import logging
import re
import secrets
import uuid
from datetime import date, datetime, timezone

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import Student, StudentImportBatch
from schoolbase.models.student_import import ImportStatus
from schoolbase.schemas.student import StudentCreate
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%m/%d/%Y"]

# Recognised columns. Headers match on the field name, the label or an alias,
# ignoring case, spaces and punctuation.
IMPORT_FIELDS = {
    "student_code": {"label": "Student ID", "required": False, "aliases": ["code"]},
    "name": {"label": "Name", "required": True, "aliases": ["student name"]},
    "name_bn": {"label": "Name in Bangla", "required": False, "aliases": ["name bangla"]},
    "roll_number": {"label": "Roll Number", "required": True, "aliases": ["roll"]},
    "class_name": {"label": "Class", "required": True, "aliases": []},
    "section": {"label": "Section", "required": False, "aliases": []},
    "date_of_birth": {"label": "Date of Birth", "required": False, "aliases": ["dob"]},
    "gender": {"label": "Gender", "required": False, "aliases": []},
    "blood_group": {"label": "Blood Group", "required": False, "aliases": []},
    "father_name": {"label": "Father Name", "required": False, "aliases": []},
    "mother_name": {"label": "Mother Name", "required": False, "aliases": []},
    "guardian_name": {"label": "Guardian Name", "required": False, "aliases": []},
    "guardian_phone": {"label": "Guardian Phone", "required": False, "aliases": []},
    "guardian_relation": {"label": "Guardian Relation", "required": False, "aliases": []},
    "present_address": {"label": "Present Address", "required": False, "aliases": ["address"]},
    "permanent_address": {"label": "Permanent Address", "required": False, "aliases": []},
    "phone": {"label": "Student Phone", "required": False, "aliases": []},
    "email": {"label": "Email", "required": False, "aliases": []},
    "admission_date": {"label": "Admission Date", "required": False, "aliases": []},
}

TEMPLATE_EXAMPLE = {
    "name": "Rahim Uddin",
    "roll_number": "1",
    "class_name": "Class 6",
    "section": "A",
    "date_of_birth": "2014-03-21",
    "gender": "male",
    "guardian_name": "Karim Uddin",
    "guardian_phone": "01711000000",
}


def _normalize(header: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", header.strip().lower()).strip("_")


_HEADER_LOOKUP = {
    _normalize(key): field
    for field, info in IMPORT_FIELDS.items()
    for key in [field, info["label"], *info["aliases"]]
}


def _parse_date(value: str) -> date:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date format: {value}")


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'row'}: {error['msg']}"
        for error in exc.errors()
    )


def build_template() -> str:
    """A CSV with every recognised column and one example row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([info["label"] for info in IMPORT_FIELDS.values()])
    writer.writerow([TEMPLATE_EXAMPLE.get(field, "") for field in IMPORT_FIELDS])
    return buffer.getvalue()


class StudentImportService:
    """Service for importing students from CSV files."""

    async def import_students(
        self, db: AsyncSession, file_name: str, content: bytes
    ) -> StudentImportBatch:
        """Import every valid row of a CSV file.

        Rows that fail validation are skipped and reported on the batch; the
        rest are created. Row numbers count the header as row 1.

        Raises:
            ValidationException: If the file is not a readable CSV, lacks a
                required column or has no rows
        """
        school_id = get_school_id()

        if not file_name.lower().endswith(".csv"):
            raise ValidationException(
                [{"field": "file", "message": "Only .csv files are accepted"}],
                message="File must be a CSV",
            )
        if len(content) > MAX_FILE_SIZE:
            raise ValidationException(
                [{"field": "file", "message": "Files are limited to 10 MB"}],
                message="File too large",
            )

        try:
            text = content.decode("utf-8-sig")  # Handle BOM
        except UnicodeDecodeError:
            raise ValidationException(
                [{"field": "file", "message": "File must be UTF-8 encoded"}],
                message="Failed to read file",
            )

        reader = csv.DictReader(io.StringIO(text))
        columns = {
            header: _HEADER_LOOKUP[_normalize(header)]
            for header in reader.fieldnames or []
            if _normalize(header) in _HEADER_LOOKUP
        }

        missing = [
            info["label"]
            for field, info in IMPORT_FIELDS.items()
            if info["required"] and field not in columns.values()
        ]
        if missing:
            raise ValidationException(
                [{"field": "file", "message": f"Missing columns: {', '.join(missing)}"}],
                message="Missing required columns",
            )

        rows = []
        for row_number, row in enumerate(reader, start=2):
            if any((value or "").strip() for value in row.values() if isinstance(value, str)):
                rows.append((row_number, row))

        if not rows:
            raise ValidationException("No data found in file")

        batch = StudentImportBatch(
            school_id=school_id,
            file_name=file_name,
            file_size=len(content),
            total_records=len(rows),
            status=ImportStatus.PROCESSING.value,
            uploaded_by=get_current_user_id_or_none(),
        )
        db.add(batch)
        await db.flush()

        taken_codes, taken_rolls = await self._get_taken_keys(db)
        errors = []
        created = 0

        for row_number, row in rows:
            try:
                data = self._parse_row(row, columns)
            except ValidationError as e:
                errors.append({"row": row_number, "message": _describe(e)})
                continue
            except ValueError as e:
                errors.append({"row": row_number, "message": str(e)})
                continue

            roll_key = (data.class_name, data.section, data.roll_number)
            if data.student_code in taken_codes:
                errors.append({
                    "row": row_number,
                    "message": f"Student ID {data.student_code} already exists",
                })
                continue
            if roll_key in taken_rolls:
                errors.append({
                    "row": row_number,
                    "message": f"Roll number {data.roll_number} already exists in {data.class_name}"
                    + (f" {data.section}" if data.section else ""),
                })
                continue

            values = data.model_dump()
            values["admission_date"] = values["admission_date"] or date.today()
            db.add(Student(school_id=school_id, **values))
            taken_codes.add(data.student_code)
            taken_rolls.add(roll_key)
            created += 1

        batch.successful_imports = created
        batch.failed_imports = len(errors)
        batch.errors = errors
        batch.status = (
            ImportStatus.COMPLETED.value if created or not errors else ImportStatus.FAILED.value
        )
        batch.completed_at = datetime.now(timezone.utc)

        await db.flush()
        await db.refresh(batch)

        logger.info(
            f"Student import {batch.id} from {file_name}: "
            f"{created} imported, {len(errors)} failed"
        )

        return batch

    async def get_batches(
        self, db: AsyncSession, page: int = 1, page_size: int = 20
    ) -> tuple[list[StudentImportBatch], int]:
        """Import history, newest first."""
        query = select(StudentImportBatch).where(
            StudentImportBatch.school_id == get_school_id(),
            StudentImportBatch.deleted_at.is_(None),
        )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(StudentImportBatch.created_at.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def get_batch(self, db: AsyncSession, batch_id: uuid.UUID) -> StudentImportBatch:
        """Get an import batch by ID."""
        result = await db.execute(
            select(StudentImportBatch).where(
                StudentImportBatch.id == batch_id,
                StudentImportBatch.school_id == get_school_id(),
                StudentImportBatch.deleted_at.is_(None),
            )
        )
        batch = result.scalar_one_or_none()

        if not batch:
            raise NotFoundException("Import batch")

        return batch

    def _parse_row(self, row: dict, columns: dict[str, str]) -> StudentCreate:
        """Turn one CSV row into a validated student payload."""
        values = {}
        for header, field in columns.items():
            raw = row.get(header)
            value = raw.strip() if isinstance(raw, str) else None
            if value:
                values[field] = value

        for field in ("name", "roll_number", "class_name"):
            if not values.get(field):
                raise ValueError(f"{IMPORT_FIELDS[field]['label']} is required")

        for field in ("date_of_birth", "admission_date"):
            if field in values:
                values[field] = _parse_date(values[field])
        if "gender" in values:
            values["gender"] = values["gender"].lower()
        if "student_code" not in values:
            values["student_code"] = f"STU-{secrets.token_hex(4).upper()}"

        return StudentCreate(**values)

    async def _get_taken_keys(
        self, db: AsyncSession
    ) -> tuple[set[str], set[tuple[str | None, str | None, str | None]]]:
        """Student codes and (class, section, roll) already used in the school."""
        result = await db.execute(
            select(
                Student.student_code, Student.class_name, Student.section, Student.roll_number
            ).where(
                Student.school_id == get_school_id(),
                Student.deleted_at.is_(None),
            )
        )
        codes = set()
        rolls = set()
        for code, class_name, section, roll_number in result.all():
            codes.add(code)
            if roll_number:
                rolls.add((class_name, section, roll_number))
        return codes, rolls


def get_student_import_service() -> StudentImportService:
    """Get student import service instance."""
    return StudentImportService()
