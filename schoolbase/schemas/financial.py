"""Pydantic schemas for transactions, budgets and fees."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from schoolbase.models.financial import (
    FeeFrequency,
    FeeStatus,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)
from schoolbase.schemas.common import DateRangeMixin


# Transactions

class TransactionCreate(BaseModel):
    """Schema for recording a transaction."""

    model_config = ConfigDict(use_enum_values=True)

    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    type: TransactionType
    category: TransactionCategory
    description: str = Field(..., min_length=1)
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, validate_default=True)
    reference: str | None = Field(None, max_length=100)
    transaction_date: date | None = None


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction."""

    model_config = ConfigDict(use_enum_values=True)

    amount: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
    type: TransactionType | None = None
    category: TransactionCategory | None = None
    description: str | None = Field(None, min_length=1)
    payment_method: PaymentMethod | None = None
    reference: str | None = Field(None, max_length=100)
    transaction_date: date | None = None


class TransactionResponse(BaseModel):
    """Schema for transaction response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount: Decimal
    type: str
    category: str
    description: str
    payment_method: str
    reference: str | None
    transaction_date: date
    budget_id: uuid.UUID | None
    created_by: uuid.UUID | None
    created_at: datetime


class FinancialSummary(BaseModel):
    """Income/expense totals over an optional date range."""

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    transaction_count: int
    start_date: date | None = None
    end_date: date | None = None


# Budgets

class BudgetCreate(DateRangeMixin):
    """Schema for creating a budget."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    total_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    category: TransactionCategory
    start_date: date
    end_date: date
    is_active: bool = True


class BudgetUpdate(BaseModel):
    """Schema for updating a budget."""

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    total_amount: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
    category: TransactionCategory | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class BudgetResponse(BaseModel):
    """Schema for budget response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    total_amount: Decimal
    used_amount: Decimal
    remaining_amount: Decimal
    category: str
    start_date: date
    end_date: date
    is_active: bool
    created_at: datetime


# Fee structures

class FeeStructureCreate(BaseModel):
    """Schema for creating a fee structure."""

    model_config = ConfigDict(use_enum_values=True)

    class_name: str = Field(..., min_length=1, max_length=50)
    fee_type: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    frequency: FeeFrequency = Field(FeeFrequency.MONTHLY, validate_default=True)
    due_day: int | None = Field(None, ge=1, le=31)
    is_active: bool = True


class FeeStructureUpdate(BaseModel):
    """Schema for updating a fee structure."""

    model_config = ConfigDict(use_enum_values=True)

    class_name: str | None = Field(None, min_length=1, max_length=50)
    fee_type: str | None = Field(None, min_length=1, max_length=100)
    amount: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    frequency: FeeFrequency | None = None
    due_day: int | None = Field(None, ge=1, le=31)
    is_active: bool | None = None


class FeeStructureResponse(BaseModel):
    """Schema for fee structure response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    class_name: str
    fee_type: str
    amount: Decimal
    frequency: str
    due_day: int | None
    is_active: bool
    created_at: datetime


# Student fees

class StudentFeeCreate(BaseModel):
    """Schema for assigning a fee to a student."""

    student_id: uuid.UUID
    fee_structure_id: uuid.UUID
    amount_due: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    due_date: date


class StudentFeeUpdate(BaseModel):
    """Schema for updating a student fee."""

    amount_due: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    due_date: date | None = None


class FeePaymentRequest(BaseModel):
    """A payment against a student fee."""

    model_config = ConfigDict(use_enum_values=True)

    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, validate_default=True)
    transaction_reference: str | None = Field(None, max_length=100)
    payment_date: date | None = None


class StudentFeeResponse(BaseModel):
    """Schema for student fee response."""

    id: uuid.UUID
    student_id: uuid.UUID
    student_name: str | None = None
    fee_structure_id: uuid.UUID
    fee_type: str | None = None
    amount_due: Decimal
    amount_paid: Decimal
    balance: Decimal
    due_date: date
    paid_date: date | None
    status: FeeStatus
    payment_method: str | None
    transaction_reference: str | None
    created_at: datetime


class FeeSummary(BaseModel):
    """Totals over a set of student fees."""

    total_due: Decimal
    total_paid: Decimal
    total_balance: Decimal
    overdue_count: int
