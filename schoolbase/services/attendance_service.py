"""Attendance service for tracking student attendance."""

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import AttendanceRecord, Student
from schoolbase.models.attendance import AttendanceStatus
from schoolbase.models.student import StudentStatus
from schoolbase.schemas.attendance import (
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceRecordUpdate,
    AttendanceStats,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
    ClassAttendanceSheet,
    ClassSheetEntry,
    StudentAttendanceOverview,
    StudentAttendanceSummary,
)
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

# History views default to the last month of school days
HISTORY_DAYS = 30


def build_attendance_response(
    record: AttendanceRecord, student_name: str | None, roll_number: str | None
) -> AttendanceRecordResponse:
    return AttendanceRecordResponse(
        id=record.id,
        student_id=record.student_id,
        student_name=student_name,
        roll_number=roll_number,
        class_name=record.class_name,
        section=record.section,
        subject=record.subject,
        attendance_date=record.attendance_date,
        status=record.status,
        remarks=record.remarks,
        recorded_by=record.recorded_by,
        created_at=record.created_at,
    )


def _rate(present: int, late: int, total: int) -> float:
    """Share of marks that count as present, as a percentage."""
    return round((present + late) / total * 100, 1) if total else 0.0


def _subject_clause(subject: str | None):
    if subject is None:
        return AttendanceRecord.subject.is_(None)
    return AttendanceRecord.subject == subject


def _check_range(date_from: date, date_to: date) -> None:
    if date_to < date_from:
        raise ValidationException(
            [{"field": "date_to", "message": "date_to must be on or after date_from"}],
            message="Invalid date range",
        )


class AttendanceService:
    """Service for managing attendance records."""

    def _record_query(self):
        return (
            select(AttendanceRecord, Student.name, Student.roll_number)
            .join(Student, Student.id == AttendanceRecord.student_id)
            .where(
                AttendanceRecord.school_id == get_school_id(),
                AttendanceRecord.deleted_at.is_(None),
            )
        )

    async def get_records(
        self,
        db: AsyncSession,
        class_name: str | None = None,
        section: str | None = None,
        subject: str | None = None,
        student_id: uuid.UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        status: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[AttendanceRecordResponse], int]:
        """Get attendance records with optional filters, newest first."""
        query = self._record_query()

        if class_name:
            query = query.where(AttendanceRecord.class_name == class_name)
        if section:
            query = query.where(AttendanceRecord.section == section)
        if subject:
            query = query.where(AttendanceRecord.subject == subject)
        if student_id:
            query = query.where(AttendanceRecord.student_id == student_id)
        if date_from:
            query = query.where(AttendanceRecord.attendance_date >= date_from)
        if date_to:
            query = query.where(AttendanceRecord.attendance_date <= date_to)
        if status:
            query = query.where(AttendanceRecord.status == status)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(
            AttendanceRecord.attendance_date.desc(),
            Student.roll_number,
            Student.name,
        )
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        records = [build_attendance_response(*row) for row in result.all()]

        return records, total

    async def get_record(self, db: AsyncSession, record_id: uuid.UUID) -> AttendanceRecordResponse:
        """Get a single attendance record by ID."""
        result = await db.execute(self._record_query().where(AttendanceRecord.id == record_id))
        row = result.one_or_none()

        if not row:
            raise NotFoundException("Attendance record")

        return build_attendance_response(*row)

    async def _get_record_row(self, db: AsyncSession, record_id: uuid.UUID) -> AttendanceRecord:
        result = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.id == record_id,
                AttendanceRecord.school_id == get_school_id(),
                AttendanceRecord.deleted_at.is_(None),
            )
        )
        record = result.scalar_one_or_none()

        if not record:
            raise NotFoundException("Attendance record")

        return record

    async def create_record(
        self, db: AsyncSession, data: AttendanceRecordCreate
    ) -> AttendanceRecordResponse:
        """Record one student's attendance.

        Raises:
            ConflictException: If the student is already marked for that day
                and subject
        """
        student = await self._get_student(db, data.student_id)

        existing = await self._get_existing_records(
            db, [student.id], data.attendance_date, data.subject
        )
        if existing:
            raise ConflictException("Attendance already recorded for this student on this date")

        record = AttendanceRecord(
            school_id=get_school_id(),
            student_id=student.id,
            class_name=student.class_name,
            section=student.section,
            subject=data.subject,
            attendance_date=data.attendance_date,
            status=data.status,
            remarks=data.remarks,
            recorded_by=get_current_user_id_or_none(),
        )
        db.add(record)
        await db.flush()

        return await self.get_record(db, record.id)

    async def update_record(
        self, db: AsyncSession, record_id: uuid.UUID, data: AttendanceRecordUpdate
    ) -> AttendanceRecordResponse:
        """Correct the status or remarks of a record."""
        record = await self._get_record_row(db, record_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not AttendanceRecord.__table__.c[field].nullable:
                continue
            setattr(record, field, value)
        record.recorded_by = get_current_user_id_or_none()

        await db.flush()

        return await self.get_record(db, record.id)

    async def delete_record(self, db: AsyncSession, record_id: uuid.UUID) -> None:
        """Soft delete a record."""
        record = await self._get_record_row(db, record_id)
        record.soft_delete()
        await db.flush()

    async def save_class_attendance(
        self, db: AsyncSession, data: BulkAttendanceCreate
    ) -> BulkAttendanceResponse:
        """Save a class sheet for one day and subject.

        Students already marked are updated in place, the rest get new
        records. Either every line is saved or none is.

        Raises:
            ValidationException: If a student appears twice or is not in the class
            NotFoundException: If a student does not exist in this school
        """
        school_id = get_school_id()
        user_id = get_current_user_id_or_none()

        student_ids = [entry.student_id for entry in data.records]
        if len(set(student_ids)) != len(student_ids):
            raise ValidationException(
                [{"field": "records", "message": "Each student may appear only once"}],
                message="Duplicate students on the attendance sheet",
            )

        result = await db.execute(
            select(Student).where(
                Student.id.in_(student_ids),
                Student.school_id == school_id,
                Student.deleted_at.is_(None),
            )
        )
        students = {student.id: student for student in result.scalars().all()}
        if len(students) != len(student_ids):
            raise NotFoundException("Student")

        outside = [
            s.name
            for s in students.values()
            if s.class_name != data.class_name or (data.section and s.section != data.section)
        ]
        if outside:
            raise ValidationException(
                [{"field": "records", "message": f"Not in {data.class_name}: {', '.join(sorted(outside))}"}],
                message="Some students are not in this class",
            )

        existing = await self._get_existing_records(db, student_ids, data.date, data.subject)

        created = updated = 0
        for entry in data.records:
            record = existing.get(entry.student_id)
            if record:
                record.status = entry.status
                record.remarks = entry.remarks
                record.recorded_by = user_id
                updated += 1
                continue

            student = students[entry.student_id]
            db.add(AttendanceRecord(
                school_id=school_id,
                student_id=student.id,
                class_name=student.class_name,
                section=student.section,
                subject=data.subject,
                attendance_date=data.date,
                status=entry.status,
                remarks=entry.remarks,
                recorded_by=user_id,
            ))
            created += 1

        await db.flush()

        logger.info(
            f"Attendance saved for {data.class_name} on {data.date}: "
            f"{created} created, {updated} updated"
        )

        return BulkAttendanceResponse(created_count=created, updated_count=updated)

    async def get_class_sheet(
        self,
        db: AsyncSession,
        class_name: str,
        section: str | None = None,
        target_date: date | None = None,
        subject: str | None = None,
    ) -> ClassAttendanceSheet:
        """The active roster of a class with each student's mark for the day."""
        school_id = get_school_id()
        target_date = target_date or date.today()

        query = select(Student).where(
            Student.school_id == school_id,
            Student.deleted_at.is_(None),
            Student.status == StudentStatus.ACTIVE.value,
            Student.class_name == class_name,
        )
        if section:
            query = query.where(Student.section == section)
        students = list(
            (await db.execute(query.order_by(Student.roll_number, Student.name))).scalars().all()
        )

        marks = await self._get_existing_records(
            db, [s.id for s in students], target_date, subject
        )

        entries = []
        counts = {status.value: 0 for status in AttendanceStatus}
        for student in students:
            record = marks.get(student.id)
            if record:
                counts[record.status] += 1
            entries.append(ClassSheetEntry(
                student_id=student.id,
                student_name=student.name,
                roll_number=student.roll_number,
                record_id=record.id if record else None,
                status=record.status if record else None,
                remarks=record.remarks if record else None,
            ))

        present = counts[AttendanceStatus.PRESENT.value]
        late = counts[AttendanceStatus.LATE.value]

        return ClassAttendanceSheet(
            class_name=class_name,
            section=section,
            subject=subject,
            date=target_date,
            students=entries,
            stats=AttendanceStats(
                date_from=target_date,
                date_to=target_date,
                total_students=len(students),
                total_records=len(marks),
                present_count=present,
                absent_count=counts[AttendanceStatus.ABSENT.value],
                late_count=late,
                excused_count=counts[AttendanceStatus.EXCUSED.value],
                attendance_rate=_rate(present, late, len(marks)),
            ),
        )

    async def get_student_overview(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> StudentAttendanceOverview:
        """A student's records and totals, by default over the last 30 days."""
        student = await self._get_student(db, student_id)

        date_to = date_to or date.today()
        date_from = date_from or date_to - timedelta(days=HISTORY_DAYS)
        _check_range(date_from, date_to)

        result = await db.execute(
            self._record_query()
            .where(
                AttendanceRecord.student_id == student.id,
                AttendanceRecord.attendance_date >= date_from,
                AttendanceRecord.attendance_date <= date_to,
            )
            .order_by(AttendanceRecord.attendance_date.desc(), AttendanceRecord.subject)
        )
        records = [build_attendance_response(*row) for row in result.all()]

        counts = {status.value: 0 for status in AttendanceStatus}
        for record in records:
            counts[record.status] += 1
        present = counts[AttendanceStatus.PRESENT.value]
        late = counts[AttendanceStatus.LATE.value]

        summary = StudentAttendanceSummary(
            student_id=student.id,
            student_name=student.name,
            date_from=date_from,
            date_to=date_to,
            total_days=len(records),
            present_days=present,
            absent_days=counts[AttendanceStatus.ABSENT.value],
            late_days=late,
            excused_days=counts[AttendanceStatus.EXCUSED.value],
            attendance_rate=_rate(present, late, len(records)),
        )

        return StudentAttendanceOverview(summary=summary, records=records)

    async def get_stats(
        self,
        db: AsyncSession,
        class_name: str | None = None,
        section: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> AttendanceStats:
        """Attendance totals, by default for the current month."""
        date_to = date_to or date.today()
        date_from = date_from or date_to.replace(day=1)
        _check_range(date_from, date_to)

        query = select(
            func.count(AttendanceRecord.student_id.distinct()),
            func.count(AttendanceRecord.id),
            func.count().filter(AttendanceRecord.status == AttendanceStatus.PRESENT.value),
            func.count().filter(AttendanceRecord.status == AttendanceStatus.ABSENT.value),
            func.count().filter(AttendanceRecord.status == AttendanceStatus.LATE.value),
            func.count().filter(AttendanceRecord.status == AttendanceStatus.EXCUSED.value),
        ).where(
            AttendanceRecord.school_id == get_school_id(),
            AttendanceRecord.deleted_at.is_(None),
            AttendanceRecord.attendance_date >= date_from,
            AttendanceRecord.attendance_date <= date_to,
        )
        if class_name:
            query = query.where(AttendanceRecord.class_name == class_name)
        if section:
            query = query.where(AttendanceRecord.section == section)

        students, total, present, absent, late, excused = (await db.execute(query)).one()

        return AttendanceStats(
            date_from=date_from,
            date_to=date_to,
            total_students=students or 0,
            total_records=total or 0,
            present_count=present or 0,
            absent_count=absent or 0,
            late_count=late or 0,
            excused_count=excused or 0,
            attendance_rate=_rate(present or 0, late or 0, total or 0),
        )

    async def _get_student(self, db: AsyncSession, student_id: uuid.UUID) -> Student:
        result = await db.execute(
            select(Student).where(
                Student.id == student_id,
                Student.school_id == get_school_id(),
                Student.deleted_at.is_(None),
            )
        )
        student = result.scalar_one_or_none()

        if not student:
            raise NotFoundException("Student")

        return student

    async def _get_existing_records(
        self,
        db: AsyncSession,
        student_ids: list[uuid.UUID],
        target_date: date,
        subject: str | None,
    ) -> dict[uuid.UUID, AttendanceRecord]:
        """Marks already taken for these students on a day and subject."""
        if not student_ids:
            return {}

        result = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.school_id == get_school_id(),
                AttendanceRecord.deleted_at.is_(None),
                AttendanceRecord.student_id.in_(student_ids),
                AttendanceRecord.attendance_date == target_date,
                _subject_clause(subject),
            )
        )
        return {record.student_id: record for record in result.scalars().all()}


def get_attendance_service() -> AttendanceService:
    """Get attendance service instance."""
    return AttendanceService()
