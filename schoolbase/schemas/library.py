"""Pydantic schemas for the library."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BookBase(BaseModel):
    """Base schema for book data."""

    title: str = Field(..., min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: str | None = Field(None, max_length=20)
    category: str = Field(..., min_length=1, max_length=100)
    publisher: str | None = Field(None, max_length=255)
    publish_year: int | None = Field(None, ge=1000, le=2100)
    location: str | None = Field(None, max_length=100)
    description: str | None = None


class BookCreate(BookBase):
    """Schema for adding a book."""

    total_copies: int = Field(1, ge=1)


class BookUpdate(BaseModel):
    """Schema for updating a book."""

    title: str | None = Field(None, min_length=1, max_length=255)
    title_bn: str | None = Field(None, max_length=255)
    author: str | None = Field(None, min_length=1, max_length=255)
    isbn: str | None = Field(None, max_length=20)
    category: str | None = Field(None, min_length=1, max_length=100)
    publisher: str | None = Field(None, max_length=255)
    publish_year: int | None = Field(None, ge=1000, le=2100)
    total_copies: int | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=100)
    description: str | None = None


class BookResponse(BookBase):
    """Schema for book response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    total_copies: int
    available_copies: int
    borrowed_copies: int
    created_at: datetime
    updated_at: datetime


class BorrowRequest(BaseModel):
    """Check a book out to a student."""

    book_id: uuid.UUID
    student_id: uuid.UUID
    due_date: date | None = None
    notes: str | None = None


class ReturnRequest(BaseModel):
    """Return a loan, optionally overriding the computed fine."""

    borrow_id: uuid.UUID
    fine: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: str | None = None


class BorrowedBookResponse(BaseModel):
    """A loan with the book title and student name joined in."""

    id: uuid.UUID
    book_id: uuid.UUID
    book_title: str | None = None
    student_id: uuid.UUID
    student_name: str | None = None
    student_code: str | None = None
    borrow_date: date
    due_date: date
    return_date: date | None
    status: str
    fine: Decimal
    notes: str | None
    created_at: datetime


class LibraryStats(BaseModel):
    """Library headline numbers."""

    total_books: int
    total_copies: int
    available_copies: int
    borrowed_copies: int
    active_loans: int
    overdue_loans: int
