"""Library models for the book catalogue and loans."""

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.models.base import SchoolScopedModel


class LoanStatus(str, Enum):
    """Status of a library loan."""

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


class LibraryBook(SchoolScopedModel):
    """A title in the school library with copy counters."""

    __tablename__ = "library_books"
    __table_args__ = (
        CheckConstraint("total_copies >= 0", name="ck_library_books_total_copies"),
        CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_library_books_available_copies",
        ),
        Index(
            "idx_library_books_school_title",
            "school_id",
            "title",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publish_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def borrowed_copies(self) -> int:
        """Copies currently out on loan."""
        return self.total_copies - self.available_copies


class LibraryBorrowedBook(SchoolScopedModel):
    """A single loan of one copy of a book to a student."""

    __tablename__ = "library_borrowed_books"
    __table_args__ = (
        Index("idx_library_loans_book", "book_id"),
        Index("idx_library_loans_student", "student_id"),
        Index(
            "idx_library_loans_school_status",
            "school_id",
            "status",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("library_books.id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    borrow_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LoanStatus.ACTIVE.value
    )
    fine: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_overdue(self) -> bool:
        """Check if an unreturned loan is past its due date."""
        return self.return_date is None and self.due_date < date.today()
