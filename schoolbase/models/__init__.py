"""SQLAlchemy models for SchoolBase."""

from schoolbase.models.base import Base, BaseModel, SchoolScopedModel, TimestampMixin, SoftDeleteMixin
from schoolbase.models.school import School
from schoolbase.models.user import User, Role
from schoolbase.models.student import Student, ParentStudent, Gender, StudentStatus
from schoolbase.models.student_import import StudentImportBatch
from schoolbase.models.teacher import Teacher
from schoolbase.models.library import LibraryBook, LibraryBorrowedBook, LoanStatus
from schoolbase.models.inventory import (
    InventoryItem,
    InventoryMovement,
    ItemCondition,
    MovementType,
    StockStatus,
)
from schoolbase.models.transport import TransportRoute, TransportVehicle, TransportStudentAssignment
from schoolbase.models.academic import AcademicYear, AcademicTerm, AcademicYearStatus, TermStatus
from schoolbase.models.attendance import AttendanceRecord, AttendanceStatus
from schoolbase.models.class_routine import ClassRoutine, RoutinePeriod, RoutineStatus
from schoolbase.models.financial import (
    Budget,
    FeeFrequency,
    FeeStatus,
    FeeStructure,
    PaymentMethod,
    StudentFee,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from schoolbase.models.calendar import CalendarEvent, EventType
from schoolbase.models.meeting import Meeting, MeetingStatus, MeetingType
from schoolbase.models.notification import Notification, NotificationPriority, NotificationType
from schoolbase.models.document_template import DocumentTemplate
from schoolbase.models.settings import AdminSettings, SchoolSettings

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "SchoolScopedModel",
    "TimestampMixin",
    "SoftDeleteMixin",
    # School
    "School",
    # User
    "User",
    "Role",
    # Student / Teacher
    "Student",
    "ParentStudent",
    "Gender",
    "StudentStatus",
    "StudentImportBatch",
    "Teacher",
    # Library
    "LibraryBook",
    "LibraryBorrowedBook",
    "LoanStatus",
    # Inventory
    "InventoryItem",
    "InventoryMovement",
    "ItemCondition",
    "MovementType",
    "StockStatus",
    # Transport
    "TransportRoute",
    "TransportVehicle",
    "TransportStudentAssignment",
    # Academic
    "AcademicYear",
    "AcademicTerm",
    "AcademicYearStatus",
    "TermStatus",
    # Attendance
    "AttendanceRecord",
    "AttendanceStatus",
    # Class routines
    "ClassRoutine",
    "RoutinePeriod",
    "RoutineStatus",
    # Financial
    "Transaction",
    "TransactionType",
    "TransactionCategory",
    "PaymentMethod",
    "Budget",
    "FeeStructure",
    "FeeFrequency",
    "StudentFee",
    "FeeStatus",
    # Calendar
    "CalendarEvent",
    "EventType",
    # Meetings
    "Meeting",
    "MeetingStatus",
    "MeetingType",
    # Notification
    "Notification",
    "NotificationType",
    "NotificationPriority",
    # Documents
    "DocumentTemplate",
    # Settings
    "SchoolSettings",
    "AdminSettings",
]
