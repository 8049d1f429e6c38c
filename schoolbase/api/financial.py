"""Financial API endpoints: transactions, budgets and fees."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.database import get_db
from schoolbase.models.financial import FeeStatus, TransactionCategory, TransactionType
from schoolbase.schemas.common import APIResponse, PaginationMeta
from schoolbase.schemas.financial import (
    BudgetCreate,
    BudgetResponse,
    BudgetUpdate,
    FeePaymentRequest,
    FeeStructureCreate,
    FeeStructureResponse,
    FeeStructureUpdate,
    FeeSummary,
    FinancialSummary,
    StudentFeeCreate,
    StudentFeeResponse,
    StudentFeeUpdate,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from schoolbase.services.financial_service import get_financial_service
from schoolbase.utils.permissions import require_school_admin, require_staff

router = APIRouter()


# Transactions

@router.get("/transactions", response_model=APIResponse[list[TransactionResponse]])
@require_school_admin()
async def list_transactions(
    type: TransactionType | None = None,
    category: TransactionCategory | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List transactions, newest first."""
    service = get_financial_service()
    transactions, total = await service.get_transactions(
        db,
        type=type.value if type else None,
        category=category.value if category else None,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )

    return APIResponse(
        data=[TransactionResponse.model_validate(t) for t in transactions],
        pagination=PaginationMeta.build(offset // limit + 1, limit, total),
    )


@router.post(
    "/transactions",
    response_model=APIResponse[TransactionResponse],
    status_code=201,
)
@require_school_admin()
async def create_transaction(
    data: TransactionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record a transaction."""
    service = get_financial_service()
    transaction = await service.create_transaction(db, data)
    await db.commit()

    return APIResponse(
        data=TransactionResponse.model_validate(transaction),
        message="Transaction created successfully",
    )


@router.get("/summary", response_model=APIResponse[FinancialSummary])
@require_school_admin()
async def get_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Income, expense and balance over an optional date range."""
    service = get_financial_service()
    summary = await service.get_summary(db, start_date=start_date, end_date=end_date)

    return APIResponse(data=summary)


@router.get("/transactions/{transaction_id}", response_model=APIResponse[TransactionResponse])
@require_school_admin()
async def get_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a transaction."""
    service = get_financial_service()
    transaction = await service.get_transaction(db, transaction_id)

    return APIResponse(data=TransactionResponse.model_validate(transaction))


@router.patch("/transactions/{transaction_id}", response_model=APIResponse[TransactionResponse])
@require_school_admin()
async def update_transaction(
    transaction_id: uuid.UUID,
    data: TransactionUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a transaction."""
    service = get_financial_service()
    transaction = await service.update_transaction(db, transaction_id, data)
    await db.commit()

    return APIResponse(
        data=TransactionResponse.model_validate(transaction),
        message="Transaction updated successfully",
    )


@router.delete("/transactions/{transaction_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a transaction."""
    service = get_financial_service()
    await service.delete_transaction(db, transaction_id)
    await db.commit()

    return APIResponse(message="Transaction deleted successfully")


# Budgets

@router.get("/budgets", response_model=APIResponse[list[BudgetResponse]])
@require_school_admin()
async def list_budgets(
    category: TransactionCategory | None = None,
    is_active: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List budgets."""
    service = get_financial_service()
    budgets = await service.get_budgets(
        db,
        category=category.value if category else None,
        is_active=is_active,
    )

    return APIResponse(data=[BudgetResponse.model_validate(b) for b in budgets])


@router.post("/budgets", response_model=APIResponse[BudgetResponse], status_code=201)
@require_school_admin()
async def create_budget(
    data: BudgetCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a budget."""
    service = get_financial_service()
    budget = await service.create_budget(db, data)
    await db.commit()

    return APIResponse(
        data=BudgetResponse.model_validate(budget),
        message="Budget created successfully",
    )


@router.patch("/budgets/{budget_id}", response_model=APIResponse[BudgetResponse])
@require_school_admin()
async def update_budget(
    budget_id: uuid.UUID,
    data: BudgetUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a budget."""
    service = get_financial_service()
    budget = await service.update_budget(db, budget_id, data)
    await db.commit()

    return APIResponse(
        data=BudgetResponse.model_validate(budget),
        message="Budget updated successfully",
    )


@router.delete("/budgets/{budget_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_budget(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a budget."""
    service = get_financial_service()
    await service.delete_budget(db, budget_id)
    await db.commit()

    return APIResponse(message="Budget deleted successfully")


# Fee structures

@router.get("/fee-structures", response_model=APIResponse[list[FeeStructureResponse]])
@require_staff()
async def list_fee_structures(
    class_name: str | None = None,
    is_active: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List fee structures ordered by class."""
    service = get_financial_service()
    structures = await service.get_fee_structures(db, class_name=class_name, is_active=is_active)

    return APIResponse(data=[FeeStructureResponse.model_validate(s) for s in structures])


@router.post(
    "/fee-structures",
    response_model=APIResponse[FeeStructureResponse],
    status_code=201,
)
@require_school_admin()
async def create_fee_structure(
    data: FeeStructureCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a fee structure."""
    service = get_financial_service()
    structure = await service.create_fee_structure(db, data)
    await db.commit()

    return APIResponse(
        data=FeeStructureResponse.model_validate(structure),
        message="Fee structure created successfully",
    )


@router.patch(
    "/fee-structures/{structure_id}",
    response_model=APIResponse[FeeStructureResponse],
)
@require_school_admin()
async def update_fee_structure(
    structure_id: uuid.UUID,
    data: FeeStructureUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a fee structure."""
    service = get_financial_service()
    structure = await service.update_fee_structure(db, structure_id, data)
    await db.commit()

    return APIResponse(
        data=FeeStructureResponse.model_validate(structure),
        message="Fee structure updated successfully",
    )


@router.delete("/fee-structures/{structure_id}", response_model=APIResponse[None])
@require_school_admin()
async def delete_fee_structure(
    structure_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a fee structure."""
    service = get_financial_service()
    await service.delete_fee_structure(db, structure_id)
    await db.commit()

    return APIResponse(message="Fee structure deleted successfully")


# Student fees

@router.get("/student-fees", response_model=APIResponse[list[StudentFeeResponse]])
@require_staff()
async def list_student_fees(
    student_id: uuid.UUID | None = None,
    status: FeeStatus | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List student fees; late unpaid fees are reported as overdue."""
    service = get_financial_service()
    fees, total = await service.get_student_fees(
        db,
        student_id=student_id,
        status=status.value if status else None,
        page=page,
        page_size=page_size,
    )

    return APIResponse(
        data=fees,
        pagination=PaginationMeta.build(page, page_size, total),
    )


@router.post(
    "/student-fees",
    response_model=APIResponse[StudentFeeResponse],
    status_code=201,
)
@require_school_admin()
async def create_student_fee(
    data: StudentFeeCreate,
    db: AsyncSession = Depends(get_db),
):
    """Assign a fee to a student."""
    service = get_financial_service()
    fee = await service.create_student_fee(db, data)
    await db.commit()

    return APIResponse(data=fee, message="Student fee created successfully")


@router.get("/student-fees/summary/{student_id}", response_model=APIResponse[FeeSummary])
@require_staff()
async def get_fee_summary(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Fee totals for one student."""
    service = get_financial_service()
    summary = await service.get_fee_summary(db, student_id)

    return APIResponse(data=summary)


@router.get("/student-fees/{fee_id}", response_model=APIResponse[StudentFeeResponse])
@require_staff()
async def get_student_fee(
    fee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a student fee."""
    service = get_financial_service()
    fee = await service.get_student_fee(db, fee_id)

    return APIResponse(data=fee)


@router.patch("/student-fees/{fee_id}", response_model=APIResponse[StudentFeeResponse])
@require_school_admin()
async def update_student_fee(
    fee_id: uuid.UUID,
    data: StudentFeeUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a student fee."""
    service = get_financial_service()
    fee = await service.update_student_fee(db, fee_id, data)
    await db.commit()

    return APIResponse(data=fee, message="Student fee updated successfully")


@router.post(
    "/student-fees/{fee_id}/payments",
    response_model=APIResponse[StudentFeeResponse],
)
@require_school_admin()
async def record_payment(
    fee_id: uuid.UUID,
    data: FeePaymentRequest,
    db: AsyncSession = Depends(get_db),
):
    """Record a payment against a student fee."""
    service = get_financial_service()
    fee = await service.record_payment(db, fee_id, data)
    await db.commit()

    return APIResponse(data=fee, message="Payment recorded successfully")
