"""User model with role-based access control."""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import Base, SoftDeleteMixin, TimestampMixin


class Role(str, Enum):
    """User roles with hierarchical permissions."""

    SUPER_ADMIN = "SUPER_ADMIN"  # Platform-wide admin (no school_id)
    SCHOOL_ADMIN = "SCHOOL_ADMIN"
    TEACHER = "TEACHER"
    PARENT = "PARENT"  # Read-only access to own children
    STUDENT = "STUDENT"  # Read-only access to own records


class User(Base, TimestampMixin, SoftDeleteMixin):
    """User account with role-based access."""

    __tablename__ = "users"
    __table_args__ = (
        # Email unique per school (NULL school_id for super admins handled separately)
        Index(
            "idx_users_email_school",
            "email",
            "school_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL AND school_id IS NOT NULL"),
            sqlite_where=text("deleted_at IS NULL AND school_id IS NOT NULL"),
        ),
        Index(
            "idx_users_email_super",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL AND school_id IS NULL"),
            sqlite_where=text("deleted_at IS NULL AND school_id IS NULL"),
        ),
        Index(
            "idx_users_school_role",
            "school_id",
            "role",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=True,  # NULL for SUPER_ADMIN
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Portal links: the student or teacher record this account belongs to
    student_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="SET NULL"),
        nullable=True,
    )
    teacher_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def full_name(self) -> str:
        """Get the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_super_admin(self) -> bool:
        """Check if user is a super admin."""
        return self.role == Role.SUPER_ADMIN.value
