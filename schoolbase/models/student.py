"""Student model and parent links."""

import uuid
from datetime import date
from enum import Enum

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import Base, SchoolScopedModel, TimestampMixin


class Gender(str, Enum):
    """Gender options."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class StudentStatus(str, Enum):
    """Enrollment status of a student."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    TRANSFERRED = "transferred"


class Student(SchoolScopedModel):
    """Student record with profile, guardian and address data."""

    __tablename__ = "students"
    __table_args__ = (
        Index(
            "idx_students_school_code",
            "school_id",
            "student_code",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_students_school_class",
            "school_id",
            "class_name",
            "section",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    student_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_bn: Mapped[str | None] = mapped_column(String(200), nullable=True)
    class_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    section: Mapped[str | None] = mapped_column(String(20), nullable=True)
    roll_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    blood_group: Mapped[str | None] = mapped_column(String(5), nullable=True)
    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    guardian_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    guardian_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    guardian_relation: Mapped[str | None] = mapped_column(String(50), nullable=True)
    present_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    permanent_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentStatus.ACTIVE.value
    )
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    admission_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    @property
    def age(self) -> int | None:
        """Calculate the student's age in years."""
        if not self.date_of_birth:
            return None
        today = date.today()
        age = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            age -= 1
        return age


class ParentStudent(Base, TimestampMixin):
    """Join table linking parent users to students with relationship metadata."""

    __tablename__ = "parent_students"
    __table_args__ = (
        Index("idx_parent_students_parent", "parent_id"),
        Index("idx_parent_students_student", "student_id"),
        Index("idx_parent_students_unique", "parent_id", "student_id", unique=True),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    relationship_type: Mapped[str] = mapped_column(
        "relationship",  # Keep DB column name as 'relationship'
        String(30),
        nullable=False,
        default="PARENT",
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
