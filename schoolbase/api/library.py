"""Library API endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.library import LoanStatus
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.library import (
    BookCreate,
    BookResponse,
    BookUpdate,
    BorrowedBookResponse,
    BorrowRequest,
    LibraryStats,
    ReturnRequest,
)
from schoolbase.services.library_service import get_library_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


@router.get("/books", response_model=APIResponse[list[BookResponse]])
@require_staff()
async def list_books(
    category: str | None = None,
    available_only: bool = False,
    search: str | None = Query(None, description="Search by title, author or ISBN"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List books in the catalogue."""
    service = get_library_service()
    books, total = await service.get_books(
        db,
        category=category,
        available_only=available_only,
        search=search,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=[BookResponse.model_validate(b) for b in books],
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post("/books", response_model=APIResponse[BookResponse], status_code=201)
@require_staff()
async def create_book(
    data: BookCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a book; all copies start available."""
    service = get_library_service()
    book = await service.create_book(db, data)
    await db.commit()

    return APIResponse(
        data=BookResponse.model_validate(book),
        message="Book created successfully",
    )


@router.get("/books/{book_id}", response_model=APIResponse[BookResponse])
@require_staff()
async def get_book(
    book_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a book."""
    service = get_library_service()
    book = await service.get_book(db, book_id)

    return APIResponse(data=BookResponse.model_validate(book))


@router.patch("/books/{book_id}", response_model=APIResponse[BookResponse])
@require_staff()
async def update_book(
    book_id: uuid.UUID,
    data: BookUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a book."""
    service = get_library_service()
    book = await service.update_book(db, book_id, data)
    await db.commit()

    return APIResponse(
        data=BookResponse.model_validate(book),
        message="Book updated successfully",
    )


@router.delete("/books/{book_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_book(
    book_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a book with no active loans."""
    service = get_library_service()
    await service.delete_book(db, book_id)
    await db.commit()

    return APIResponse(message="Book deleted successfully")


@router.get("/borrowed", response_model=APIResponse[list[BorrowedBookResponse]])
@require_staff()
async def list_borrowed_books(
    status: LoanStatus | None = None,
    student_id: uuid.UUID | None = None,
    book_id: uuid.UUID | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List loans with the book title and student name."""
    service = get_library_service()
    loans, total = await service.get_borrowed_books(
        db,
        status=status.value if status else None,
        student_id=student_id,
        book_id=book_id,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=loans,
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.get("/borrowed/{loan_id}", response_model=APIResponse[BorrowedBookResponse])
@require_staff()
async def get_loan(
    loan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get one loan."""
    service = get_library_service()
    loan = await service.get_loan(db, loan_id)

    return APIResponse(data=loan)


@router.post("/borrow", response_model=APIResponse[BorrowedBookResponse], status_code=201)
@require_staff()
async def borrow_book(
    data: BorrowRequest,
    db: AsyncSession = Depends(get_db),
):
    """Check a book out to a student."""
    service = get_library_service()
    loan = await service.borrow_book(db, data)
    await db.commit()

    return APIResponse(data=loan, message="Book borrowed successfully")


@router.post("/return", response_model=APIResponse[BorrowedBookResponse])
@require_staff()
async def return_book(
    data: ReturnRequest,
    db: AsyncSession = Depends(get_db),
):
    """Return a borrowed book."""
    service = get_library_service()
    loan = await service.return_book(db, data)
    await db.commit()

    return APIResponse(data=loan, message="Book returned successfully")


@router.get("/stats", response_model=APIResponse[LibraryStats])
@require_staff()
async def get_library_stats(db: AsyncSession = Depends(get_db)):
    """Library headline numbers."""
    service = get_library_service()
    stats = await service.get_stats(db)

    return APIResponse(data=stats)
