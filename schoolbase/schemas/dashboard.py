"""Pydantic schemas for dashboards and portals."""

import uuid
from decimal import Decimal

from pydantic import BaseModel

from schoolbase.schemas.financial import FeeSummary, StudentFeeResponse
from schoolbase.schemas.library import BorrowedBookResponse
from schoolbase.schemas.student import StudentResponse


class DashboardStats(BaseModel):
    """Headline numbers for the current school."""

    total_students: int
    active_students: int
    total_teachers: int
    total_books: int
    borrowed_books: int
    overdue_books: int
    inventory_items: int
    low_stock_items: int
    transport_routes: int
    pending_fees: int
    pending_fee_amount: Decimal
    monthly_income: Decimal
    monthly_expense: Decimal
    upcoming_events: int
    unread_notifications: int


class ClassCount(BaseModel):
    """Student count for one class/section."""

    class_name: str | None
    section: str | None
    count: int


class StudentFeesOverview(BaseModel):
    """A student's fees and their totals."""

    student_id: uuid.UUID
    summary: FeeSummary
    fees: list[StudentFeeResponse]


class ChildOverview(BaseModel):
    """A linked child as seen from the parent portal."""

    student: StudentResponse
    relationship_type: str
    is_primary: bool


class StudentLoansOverview(BaseModel):
    """A student's library loans."""

    student_id: uuid.UUID
    active: int
    overdue: int
    loans: list[BorrowedBookResponse]


class TeacherPortalStats(BaseModel):
    """Numbers relevant to a teacher."""

    total_students: int
    classes: list[ClassCount]
    upcoming_events: int
    unread_notifications: int
