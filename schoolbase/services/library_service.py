"""Library service for the book catalogue, loans, checkout and return."""

import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.config import settings
from schoolbase.exceptions import ConflictException, NotFoundException, ValidationException
from schoolbase.models import LibraryBook, LibraryBorrowedBook, Student
from schoolbase.models.library import LoanStatus
from schoolbase.schemas.library import (
    BookCreate,
    BookUpdate,
    BorrowedBookResponse,
    BorrowRequest,
    LibraryStats,
    ReturnRequest,
)
from schoolbase.utils.money import to_money
from schoolbase.utils.school_context import get_school_id

logger = logging.getLogger(__name__)


def _overdue_clause(today: date):
    """SQL condition matching unreturned loans past their due date."""
    return and_(LibraryBorrowedBook.return_date.is_(None), LibraryBorrowedBook.due_date < today)


def build_loan_response(
    loan: LibraryBorrowedBook,
    book_title: str | None,
    student_name: str | None,
    student_code: str | None = None,
) -> BorrowedBookResponse:
    """Build a loan response, reporting late active loans as overdue."""
    status = LoanStatus.OVERDUE.value if loan.is_overdue else loan.status
    return BorrowedBookResponse(
        id=loan.id,
        book_id=loan.book_id,
        book_title=book_title,
        student_id=loan.student_id,
        student_name=student_name,
        student_code=student_code,
        borrow_date=loan.borrow_date,
        due_date=loan.due_date,
        return_date=loan.return_date,
        status=status,
        fine=to_money(loan.fine),
        notes=loan.notes,
        created_at=loan.created_at,
    )


class LibraryService:
    """Service for the school library."""

    # Books

    async def get_books(
        self,
        db: AsyncSession,
        category: str | None = None,
        available_only: bool = False,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[LibraryBook], int]:
        """Get books with optional filters."""
        query = select(LibraryBook).where(
            LibraryBook.school_id == get_school_id(),
            LibraryBook.deleted_at.is_(None),
        )

        if category:
            query = query.where(LibraryBook.category == category)
        if available_only:
            query = query.where(LibraryBook.available_copies > 0)
        if search:
            search_term = f"%{search}%"
            query = query.where(
                (LibraryBook.title.ilike(search_term))
                | (LibraryBook.title_bn.ilike(search_term))
                | (LibraryBook.author.ilike(search_term))
                | (LibraryBook.isbn.ilike(search_term))
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(LibraryBook.title).offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_book(
        self, db: AsyncSession, book_id: uuid.UUID, for_update: bool = False
    ) -> LibraryBook:
        """Get a single book by ID, optionally locking its row."""
        query = select(LibraryBook).where(
            LibraryBook.id == book_id,
            LibraryBook.school_id == get_school_id(),
            LibraryBook.deleted_at.is_(None),
        )
        if for_update:
            query = query.with_for_update()

        result = await db.execute(query)
        book = result.scalar_one_or_none()

        if not book:
            raise NotFoundException("Book")

        return book

    async def create_book(self, db: AsyncSession, data: BookCreate) -> LibraryBook:
        """Add a book; every copy starts out available."""
        book = LibraryBook(
            school_id=get_school_id(),
            available_copies=data.total_copies,
            **data.model_dump(),
        )
        db.add(book)
        await db.flush()
        await db.refresh(book)

        return book

    async def update_book(
        self, db: AsyncSession, book_id: uuid.UUID, data: BookUpdate
    ) -> LibraryBook:
        """Update a book; changing total copies keeps the loaned copies on loan."""
        book = await self.get_book(db, book_id, for_update=True)
        update_data = data.model_dump(exclude_unset=True)

        total_copies = update_data.pop("total_copies", None)
        if total_copies is not None and total_copies != book.total_copies:
            on_loan = book.total_copies - book.available_copies
            if total_copies < on_loan:
                raise ValidationException(
                    [{
                        "field": "total_copies",
                        "message": f"{on_loan} copies are on loan; total cannot be lower",
                    }],
                    message="Total copies cannot be less than copies on loan",
                )
            book.total_copies = total_copies
            book.available_copies = total_copies - on_loan

        for field, value in update_data.items():
            if value is None and not LibraryBook.__table__.c[field].nullable:
                continue
            setattr(book, field, value)

        await db.flush()
        await db.refresh(book)

        return book

    async def delete_book(self, db: AsyncSession, book_id: uuid.UUID) -> None:
        """Soft delete a book that has no active loans."""
        book = await self.get_book(db, book_id, for_update=True)

        active = await db.execute(
            select(func.count(LibraryBorrowedBook.id)).where(
                LibraryBorrowedBook.book_id == book.id,
                LibraryBorrowedBook.return_date.is_(None),
                LibraryBorrowedBook.deleted_at.is_(None),
            )
        )
        if (active.scalar() or 0) > 0:
            raise ConflictException("Book has active loans and cannot be deleted")

        book.soft_delete()
        await db.flush()

    # Loans

    def _loan_query(self):
        return (
            select(LibraryBorrowedBook, LibraryBook.title, Student.name, Student.student_code)
            .join(LibraryBook, LibraryBook.id == LibraryBorrowedBook.book_id)
            .join(Student, Student.id == LibraryBorrowedBook.student_id)
            .where(
                LibraryBorrowedBook.school_id == get_school_id(),
                LibraryBorrowedBook.deleted_at.is_(None),
            )
        )

    async def get_borrowed_books(
        self,
        db: AsyncSession,
        status: str | None = None,
        student_id: uuid.UUID | None = None,
        book_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[BorrowedBookResponse], int]:
        """Get loans with book title and student name joined in."""
        today = date.today()
        query = self._loan_query()

        if student_id:
            query = query.where(LibraryBorrowedBook.student_id == student_id)
        if book_id:
            query = query.where(LibraryBorrowedBook.book_id == book_id)
        if status == LoanStatus.OVERDUE.value:
            query = query.where(_overdue_clause(today))
        elif status == LoanStatus.ACTIVE.value:
            query = query.where(
                LibraryBorrowedBook.return_date.is_(None),
                LibraryBorrowedBook.due_date >= today,
            )
        elif status == LoanStatus.RETURNED.value:
            query = query.where(LibraryBorrowedBook.return_date.is_not(None))

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(LibraryBorrowedBook.borrow_date.desc(), LibraryBorrowedBook.created_at.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        loans = [build_loan_response(*row) for row in result.all()]

        return loans, total

    async def get_loan(self, db: AsyncSession, loan_id: uuid.UUID) -> BorrowedBookResponse:
        """Get a single loan with labels."""
        result = await db.execute(self._loan_query().where(LibraryBorrowedBook.id == loan_id))
        row = result.one_or_none()

        if not row:
            raise NotFoundException("Loan")

        return build_loan_response(*row)

    async def borrow_book(self, db: AsyncSession, data: BorrowRequest) -> BorrowedBookResponse:
        """Check a copy out to a student.

        The book row is locked while the counter is checked and decremented,
        and the loan is inserted in the same transaction.

        Raises:
            ConflictException: If no copy is available or the student already
                holds this book
            ValidationException: If the due date is in the past
        """
        school_id = get_school_id()
        today = date.today()

        student_result = await db.execute(
            select(Student).where(
                Student.id == data.student_id,
                Student.school_id == school_id,
                Student.deleted_at.is_(None),
            )
        )
        student = student_result.scalar_one_or_none()
        if not student:
            raise NotFoundException("Student")

        due_date = data.due_date or today + timedelta(days=settings.library_loan_days)
        if due_date < today:
            raise ValidationException(
                [{"field": "due_date", "message": "Due date cannot be in the past"}],
                message="Due date cannot be in the past",
            )

        book = await self.get_book(db, data.book_id, for_update=True)

        if book.available_copies <= 0:
            raise ConflictException("Book not available")

        existing = await db.execute(
            select(LibraryBorrowedBook.id).where(
                LibraryBorrowedBook.book_id == book.id,
                LibraryBorrowedBook.student_id == student.id,
                LibraryBorrowedBook.return_date.is_(None),
                LibraryBorrowedBook.deleted_at.is_(None),
            )
        )
        if existing.first() is not None:
            raise ConflictException("Student already has this book")

        book.available_copies -= 1

        loan = LibraryBorrowedBook(
            school_id=school_id,
            book_id=book.id,
            student_id=student.id,
            borrow_date=today,
            due_date=due_date,
            status=LoanStatus.ACTIVE.value,
            fine=Decimal("0.00"),
            notes=data.notes,
        )
        db.add(loan)
        await db.flush()
        await db.refresh(loan)

        logger.info(
            f"Book {book.id} checked out to student {student.id} "
            f"({book.available_copies}/{book.total_copies} left)"
        )

        return build_loan_response(loan, book.title, student.name, student.student_code)

    async def return_book(self, db: AsyncSession, data: ReturnRequest) -> BorrowedBookResponse:
        """Return a loan, charging the late fine unless one is supplied.

        Raises:
            ConflictException: If the loan was already returned
        """
        today = date.today()

        result = await db.execute(
            select(LibraryBorrowedBook)
            .where(
                LibraryBorrowedBook.id == data.borrow_id,
                LibraryBorrowedBook.school_id == get_school_id(),
                LibraryBorrowedBook.deleted_at.is_(None),
            )
            .with_for_update()
        )
        loan = result.scalar_one_or_none()
        if not loan:
            raise NotFoundException("Loan")
        if loan.return_date is not None:
            raise ConflictException("Book already returned")

        # The book may have been soft-deleted since; the counter still applies
        book_result = await db.execute(
            select(LibraryBook).where(LibraryBook.id == loan.book_id).with_for_update()
        )
        book = book_result.scalar_one()

        if data.fine is not None:
            fine = data.fine
        else:
            days_late = max((today - loan.due_date).days, 0)
            fine = to_money(settings.library_fine_per_day * days_late)

        loan.return_date = today
        loan.status = LoanStatus.RETURNED.value
        loan.fine = fine
        if data.notes:
            loan.notes = data.notes

        book.available_copies = min(book.available_copies + 1, book.total_copies)

        await db.flush()

        student_result = await db.execute(
            select(Student.name, Student.student_code).where(Student.id == loan.student_id)
        )
        student_name, student_code = student_result.one()

        logger.info(f"Loan {loan.id} returned (fine={fine})")

        return build_loan_response(loan, book.title, student_name, student_code)

    async def get_stats(self, db: AsyncSession) -> LibraryStats:
        """Library headline numbers."""
        school_id = get_school_id()
        today = date.today()

        books = await db.execute(
            select(
                func.count(LibraryBook.id),
                func.coalesce(func.sum(LibraryBook.total_copies), 0),
                func.coalesce(func.sum(LibraryBook.available_copies), 0),
            ).where(
                LibraryBook.school_id == school_id,
                LibraryBook.deleted_at.is_(None),
            )
        )
        total_books, total_copies, available_copies = books.one()

        loan_filter = [
            LibraryBorrowedBook.school_id == school_id,
            LibraryBorrowedBook.deleted_at.is_(None),
            LibraryBorrowedBook.return_date.is_(None),
        ]
        active = await db.execute(select(func.count(LibraryBorrowedBook.id)).where(*loan_filter))
        overdue = await db.execute(
            select(func.count(LibraryBorrowedBook.id)).where(
                *loan_filter, LibraryBorrowedBook.due_date < today
            )
        )

        return LibraryStats(
            total_books=total_books or 0,
            total_copies=int(total_copies),
            available_copies=int(available_copies),
            borrowed_copies=int(total_copies) - int(available_copies),
            active_loans=active.scalar() or 0,
            overdue_loans=overdue.scalar() or 0,
        )


def get_library_service() -> LibraryService:
    """Get library service instance."""
    return LibraryService()
