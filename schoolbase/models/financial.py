"""Financial models: ledger transactions, budgets and student fees."""

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    Boolean,
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


class TransactionType(str, Enum):
    """Direction of money flow."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """Ledger categories."""

    FEE = "fee"
    SALARY = "salary"
    UTILITY = "utility"
    EQUIPMENT = "equipment"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """Accepted payment channels, including local mobile wallets."""

    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    BKASH = "bkash"
    NAGAD = "nagad"
    ROCKET = "rocket"
    UPAY = "upay"
    OTHER = "other"


class FeeFrequency(str, Enum):
    """How often a fee is charged."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"


class FeeStatus(str, Enum):
    """Payment status of a student fee."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class Transaction(SchoolScopedModel):
    """A single income or expense entry in the school ledger."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount"),
        Index(
            "idx_transactions_school_date",
            "school_id",
            "transaction_date",
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_transactions_budget", "budget_id"),
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(30), nullable=False, default=PaymentMethod.CASH.value
    )
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    budget_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("budgets.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


class Budget(SchoolScopedModel):
    """A spending budget for a ledger category over a date range."""

    __tablename__ = "budgets"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_budgets_dates"),
        Index(
            "idx_budgets_school_category",
            "school_id",
            "category",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    used_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def remaining_amount(self) -> Decimal:
        """Budget left to spend."""
        return Decimal(self.total_amount) - Decimal(self.used_amount or 0)


class FeeStructure(SchoolScopedModel):
    """A fee charged to a class (tuition, exam, transport...)."""

    __tablename__ = "fee_structures"
    __table_args__ = (
        Index(
            "idx_fee_structures_school_class",
            "school_id",
            "class_name",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    class_name: Mapped[str] = mapped_column(String(50), nullable=False)
    fee_type: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    frequency: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FeeFrequency.MONTHLY.value
    )
    due_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


class StudentFee(SchoolScopedModel):
    """An amount a student owes against a fee structure."""

    __tablename__ = "student_fees"
    __table_args__ = (
        CheckConstraint(
            "amount_paid >= 0 AND amount_paid <= amount_due",
            name="ck_student_fees_amount_paid",
        ),
        Index("idx_student_fees_student", "student_id"),
        Index(
            "idx_student_fees_school_status",
            "school_id",
            "status",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    fee_structure_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("fee_structures.id", ondelete="RESTRICT"),
        nullable=False,
    )
    amount_due: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FeeStatus.PENDING.value
    )
    payment_method: Mapped[str | None] = mapped_column(String(30), nullable=True)
    transaction_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def balance(self) -> Decimal:
        """Outstanding amount."""
        return Decimal(self.amount_due) - Decimal(self.amount_paid or 0)

    @property
    def effective_status(self) -> str:
        """Status as reported to clients, with overdue derived from the due date."""
        if self.status in (FeeStatus.PENDING.value, FeeStatus.PARTIAL.value) and self.due_date < date.today():
            return FeeStatus.OVERDUE.value
        return self.status
