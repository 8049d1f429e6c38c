"""Financial service for the ledger, budgets, fee structures and student fees."""

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.exceptions import NotFoundException, ValidationException
from schoolbase.models import Budget, FeeStructure, Student, StudentFee, Transaction
from schoolbase.models.financial import FeeStatus, TransactionCategory, TransactionType
from schoolbase.schemas.financial import (
    BudgetCreate,
    BudgetUpdate,
    FeePaymentRequest,
    FeeStructureCreate,
    FeeStructureUpdate,
    FeeSummary,
    FinancialSummary,
    StudentFeeCreate,
    StudentFeeResponse,
    StudentFeeUpdate,
    TransactionCreate,
    TransactionUpdate,
)
from schoolbase.utils.money import to_money
from schoolbase.utils.school_context import get_current_user_id_or_none, get_school_id

logger = logging.getLogger(__name__)

OPEN_FEE_STATUSES = (FeeStatus.PENDING.value, FeeStatus.PARTIAL.value)


def _overdue_clause(today: date):
    """SQL condition matching fees reported as overdue."""
    return or_(
        StudentFee.status == FeeStatus.OVERDUE.value,
        and_(StudentFee.status.in_(OPEN_FEE_STATUSES), StudentFee.due_date < today),
    )


def build_student_fee_response(
    fee: StudentFee, student_name: str | None, fee_type: str | None
) -> StudentFeeResponse:
    """Build a fee response with the derived status and balance."""
    return StudentFeeResponse(
        id=fee.id,
        student_id=fee.student_id,
        student_name=student_name,
        fee_structure_id=fee.fee_structure_id,
        fee_type=fee_type,
        amount_due=to_money(fee.amount_due),
        amount_paid=to_money(fee.amount_paid),
        balance=to_money(fee.balance),
        due_date=fee.due_date,
        paid_date=fee.paid_date,
        status=fee.effective_status,
        payment_method=fee.payment_method,
        transaction_reference=fee.transaction_reference,
        created_at=fee.created_at,
    )


class FinancialService:
    """Service for financial records."""

    # Transactions

    async def get_transactions(
        self,
        db: AsyncSession,
        type: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Transaction], int]:
        """Get ledger entries, newest first."""
        base_filter = [
            Transaction.school_id == get_school_id(),
            Transaction.deleted_at.is_(None),
        ]

        if type:
            base_filter.append(Transaction.type == type)
        if category:
            base_filter.append(Transaction.category == category)
        if start_date:
            base_filter.append(Transaction.transaction_date >= start_date)
        if end_date:
            base_filter.append(Transaction.transaction_date <= end_date)

        # Count
        count_query = select(func.count(Transaction.id)).where(*base_filter)
        total = (await db.execute(count_query)).scalar() or 0

        query = (
            select(Transaction)
            .where(*base_filter)
            .order_by(Transaction.transaction_date.desc(), Transaction.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def get_transaction(self, db: AsyncSession, transaction_id: uuid.UUID) -> Transaction:
        """Get a single ledger entry by ID."""
        result = await db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.school_id == get_school_id(),
                Transaction.deleted_at.is_(None),
            )
        )
        transaction = result.scalar_one_or_none()

        if not transaction:
            raise NotFoundException("Transaction")

        return transaction

    async def create_transaction(self, db: AsyncSession, data: TransactionCreate) -> Transaction:
        """Record a ledger entry; expenses count against a matching budget."""
        values = data.model_dump()
        values["transaction_date"] = values.get("transaction_date") or date.today()

        transaction = Transaction(
            school_id=get_school_id(),
            created_by=get_current_user_id_or_none(),
            **values,
        )
        db.add(transaction)

        await self._charge_budget(db, transaction)

        await db.flush()
        await db.refresh(transaction)

        return transaction

    async def update_transaction(
        self, db: AsyncSession, transaction_id: uuid.UUID, data: TransactionUpdate
    ) -> Transaction:
        """Update a ledger entry and move its budget usage accordingly."""
        transaction = await self.get_transaction(db, transaction_id)

        await self._release_budget(db, transaction)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not Transaction.__table__.c[field].nullable:
                continue
            setattr(transaction, field, value)

        await self._charge_budget(db, transaction)

        await db.flush()
        await db.refresh(transaction)

        return transaction

    async def delete_transaction(self, db: AsyncSession, transaction_id: uuid.UUID) -> None:
        """Soft delete a ledger entry, releasing its budget usage."""
        transaction = await self.get_transaction(db, transaction_id)

        await self._release_budget(db, transaction)
        transaction.soft_delete()

        await db.flush()

    async def get_summary(
        self,
        db: AsyncSession,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> FinancialSummary:
        """Total income and expense over an optional date range."""
        base_filter = [
            Transaction.school_id == get_school_id(),
            Transaction.deleted_at.is_(None),
        ]
        if start_date:
            base_filter.append(Transaction.transaction_date >= start_date)
        if end_date:
            base_filter.append(Transaction.transaction_date <= end_date)

        query = select(
            func.sum(
                case((Transaction.type == TransactionType.INCOME.value, Transaction.amount), else_=0)
            ),
            func.sum(
                case((Transaction.type == TransactionType.EXPENSE.value, Transaction.amount), else_=0)
            ),
            func.count(Transaction.id),
        ).where(*base_filter)
        income, expense, count = (await db.execute(query)).one()

        total_income = to_money(income)
        total_expense = to_money(expense)

        return FinancialSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
            transaction_count=count or 0,
            start_date=start_date,
            end_date=end_date,
        )

    async def _charge_budget(self, db: AsyncSession, transaction: Transaction) -> None:
        """Charge an expense to the active budget covering its category and date.

        When several budgets qualify the one starting latest wins. The chosen
        budget is stored on the transaction so a later release hits the same row.
        """
        if transaction.type != TransactionType.EXPENSE.value:
            return

        result = await db.execute(
            select(Budget)
            .where(
                Budget.school_id == transaction.school_id,
                Budget.deleted_at.is_(None),
                Budget.is_active.is_(True),
                Budget.category == transaction.category,
                Budget.start_date <= transaction.transaction_date,
                Budget.end_date >= transaction.transaction_date,
            )
            .order_by(Budget.start_date.desc())
            .limit(1)
            .with_for_update()
        )
        budget = result.scalar_one_or_none()
        if budget is None:
            return

        transaction.budget_id = budget.id
        budget.used_amount = to_money(budget.used_amount) + to_money(transaction.amount)

        if budget.used_amount > to_money(budget.total_amount):
            logger.warning(
                f"Budget {budget.id} ({budget.name}) exceeded: "
                f"{budget.used_amount} of {budget.total_amount}"
            )

    async def _release_budget(self, db: AsyncSession, transaction: Transaction) -> None:
        """Give an expense's amount back to the budget it was charged to."""
        if transaction.budget_id is None:
            return

        result = await db.execute(
            select(Budget).where(Budget.id == transaction.budget_id).with_for_update()
        )
        budget = result.scalar_one_or_none()
        transaction.budget_id = None
        if budget is None:
            return

        used = to_money(budget.used_amount) - to_money(transaction.amount)
        budget.used_amount = max(used, Decimal("0.00"))

    async def _rebalance_budget(self, db: AsyncSession, budget: Budget) -> None:
        """Move charges a budget no longer covers onto the budget that does."""
        result = await db.execute(
            select(Transaction)
            .where(
                Transaction.budget_id == budget.id,
                Transaction.deleted_at.is_(None),
            )
            .with_for_update()
        )

        for transaction in result.scalars().all():
            if budget.deleted_at is None and budget.is_active and (
                budget.category == transaction.category
                and budget.start_date <= transaction.transaction_date <= budget.end_date
            ):
                continue
            await self._release_budget(db, transaction)
            await self._charge_budget(db, transaction)

    # Budgets

    async def get_budgets(
        self,
        db: AsyncSession,
        category: str | None = None,
        is_active: bool | None = None,
    ) -> list[Budget]:
        """Get budgets, most recent first."""
        query = select(Budget).where(
            Budget.school_id == get_school_id(),
            Budget.deleted_at.is_(None),
        )
        if category:
            query = query.where(Budget.category == category)
        if is_active is not None:
            query = query.where(Budget.is_active == is_active)

        result = await db.execute(query.order_by(Budget.start_date.desc(), Budget.name))
        return list(result.scalars().all())

    async def get_budget(self, db: AsyncSession, budget_id: uuid.UUID) -> Budget:
        """Get a single budget by ID."""
        result = await db.execute(
            select(Budget).where(
                Budget.id == budget_id,
                Budget.school_id == get_school_id(),
                Budget.deleted_at.is_(None),
            )
        )
        budget = result.scalar_one_or_none()

        if not budget:
            raise NotFoundException("Budget")

        return budget

    async def create_budget(self, db: AsyncSession, data: BudgetCreate) -> Budget:
        """Create a budget."""
        budget = Budget(
            school_id=get_school_id(),
            created_by=get_current_user_id_or_none(),
            used_amount=Decimal("0.00"),
            **data.model_dump(),
        )
        db.add(budget)
        await db.flush()
        await db.refresh(budget)

        return budget

    async def update_budget(
        self, db: AsyncSession, budget_id: uuid.UUID, data: BudgetUpdate
    ) -> Budget:
        """Update a budget; charges it stops covering move to another budget."""
        budget = await self.get_budget(db, budget_id)

        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or Budget.__table__.c[field].nullable
        }
        start = update_data.get("start_date", budget.start_date)
        end = update_data.get("end_date", budget.end_date)
        if end < start:
            raise ValidationException(
                [{"field": "end_date", "message": "end_date must be on or after start_date"}],
                message="Invalid date range",
            )

        for field, value in update_data.items():
            setattr(budget, field, value)

        await db.flush()
        await self._rebalance_budget(db, budget)

        await db.flush()
        await db.refresh(budget)

        return budget

    async def delete_budget(self, db: AsyncSession, budget_id: uuid.UUID) -> None:
        """Soft delete a budget, moving its charges to any other covering budget."""
        budget = await self.get_budget(db, budget_id)
        budget.soft_delete()
        await db.flush()

        await self._rebalance_budget(db, budget)
        await db.flush()

    # Fee structures

    async def get_fee_structures(
        self,
        db: AsyncSession,
        class_name: str | None = None,
        is_active: bool | None = None,
    ) -> list[FeeStructure]:
        """Get fee structures ordered by class name."""
        query = select(FeeStructure).where(
            FeeStructure.school_id == get_school_id(),
            FeeStructure.deleted_at.is_(None),
        )
        if class_name:
            query = query.where(FeeStructure.class_name == class_name)
        if is_active is not None:
            query = query.where(FeeStructure.is_active == is_active)

        result = await db.execute(query.order_by(FeeStructure.class_name, FeeStructure.fee_type))
        return list(result.scalars().all())

    async def get_fee_structure(self, db: AsyncSession, structure_id: uuid.UUID) -> FeeStructure:
        """Get a single fee structure by ID."""
        result = await db.execute(
            select(FeeStructure).where(
                FeeStructure.id == structure_id,
                FeeStructure.school_id == get_school_id(),
                FeeStructure.deleted_at.is_(None),
            )
        )
        structure = result.scalar_one_or_none()

        if not structure:
            raise NotFoundException("Fee structure")

        return structure

    async def create_fee_structure(self, db: AsyncSession, data: FeeStructureCreate) -> FeeStructure:
        """Create a fee structure."""
        structure = FeeStructure(
            school_id=get_school_id(),
            created_by=get_current_user_id_or_none(),
            **data.model_dump(),
        )
        db.add(structure)
        await db.flush()
        await db.refresh(structure)

        return structure

    async def update_fee_structure(
        self, db: AsyncSession, structure_id: uuid.UUID, data: FeeStructureUpdate
    ) -> FeeStructure:
        """Update a fee structure (existing student fees keep their amounts)."""
        structure = await self.get_fee_structure(db, structure_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and not FeeStructure.__table__.c[field].nullable:
                continue
            setattr(structure, field, value)

        await db.flush()
        await db.refresh(structure)

        return structure

    async def delete_fee_structure(self, db: AsyncSession, structure_id: uuid.UUID) -> None:
        """Soft delete a fee structure."""
        structure = await self.get_fee_structure(db, structure_id)
        structure.soft_delete()
        await db.flush()

    # Student fees

    def _student_fee_query(self):
        return (
            select(StudentFee, Student.name, FeeStructure.fee_type)
            .join(Student, Student.id == StudentFee.student_id)
            .join(FeeStructure, FeeStructure.id == StudentFee.fee_structure_id)
            .where(
                StudentFee.school_id == get_school_id(),
                StudentFee.deleted_at.is_(None),
            )
        )

    async def get_student_fees(
        self,
        db: AsyncSession,
        student_id: uuid.UUID | None = None,
        status: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[StudentFeeResponse], int]:
        """Get student fees; open fees past their due date are reported overdue."""
        today = date.today()
        query = self._student_fee_query()

        if student_id:
            query = query.where(StudentFee.student_id == student_id)
        if status == FeeStatus.OVERDUE.value:
            query = query.where(_overdue_clause(today))
        elif status in OPEN_FEE_STATUSES:
            query = query.where(StudentFee.status == status, StudentFee.due_date >= today)
        elif status:
            query = query.where(StudentFee.status == status)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(StudentFee.due_date.desc(), Student.name)
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        fees = [build_student_fee_response(fee, name, fee_type) for fee, name, fee_type in result.all()]

        return fees, total

    async def get_student_fee(self, db: AsyncSession, fee_id: uuid.UUID) -> StudentFeeResponse:
        """Get a single student fee with student name and fee type."""
        result = await db.execute(self._student_fee_query().where(StudentFee.id == fee_id))
        row = result.one_or_none()

        if not row:
            raise NotFoundException("Student fee")

        return build_student_fee_response(*row)

    async def get_fee_summary(self, db: AsyncSession, student_id: uuid.UUID) -> FeeSummary:
        """Totals over one student's fees."""
        today = date.today()
        query = select(
            func.sum(StudentFee.amount_due),
            func.sum(StudentFee.amount_paid),
            func.count(case((_overdue_clause(today), StudentFee.id))),
        ).where(
            StudentFee.school_id == get_school_id(),
            StudentFee.student_id == student_id,
            StudentFee.deleted_at.is_(None),
        )
        due, paid, overdue = (await db.execute(query)).one()

        total_due = to_money(due)
        total_paid = to_money(paid)

        return FeeSummary(
            total_due=total_due,
            total_paid=total_paid,
            total_balance=total_due - total_paid,
            overdue_count=overdue or 0,
        )

    async def create_student_fee(self, db: AsyncSession, data: StudentFeeCreate) -> StudentFeeResponse:
        """Assign a fee to a student; the amount defaults to the structure's."""
        school_id = get_school_id()

        student = await db.execute(
            select(Student.id).where(
                Student.id == data.student_id,
                Student.school_id == school_id,
                Student.deleted_at.is_(None),
            )
        )
        if student.scalar_one_or_none() is None:
            raise NotFoundException("Student")

        structure = await self.get_fee_structure(db, data.fee_structure_id)

        fee = StudentFee(
            school_id=school_id,
            student_id=data.student_id,
            fee_structure_id=structure.id,
            amount_due=data.amount_due or structure.amount,
            amount_paid=Decimal("0.00"),
            due_date=data.due_date,
            status=FeeStatus.PENDING.value,
            created_by=get_current_user_id_or_none(),
        )
        db.add(fee)
        await db.flush()

        return await self.get_student_fee(db, fee.id)

    async def update_student_fee(
        self, db: AsyncSession, fee_id: uuid.UUID, data: StudentFeeUpdate
    ) -> StudentFeeResponse:
        """Change the amount or due date of a student fee."""
        fee = await self._lock_student_fee(db, fee_id)

        if data.amount_due is not None:
            if data.amount_due < to_money(fee.amount_paid):
                raise ValidationException(
                    [{"field": "amount_due", "message": "Amount due cannot be less than the amount already paid"}],
                    message="Amount due cannot be less than the amount already paid",
                )
            fee.amount_due = data.amount_due
            self._update_fee_status(fee, fee.paid_date or date.today())
        if data.due_date is not None:
            fee.due_date = data.due_date

        await db.flush()

        return await self.get_student_fee(db, fee.id)

    async def record_payment(
        self, db: AsyncSession, fee_id: uuid.UUID, data: FeePaymentRequest
    ) -> StudentFeeResponse:
        """Record a payment against a student fee.

        The fee row is locked for the duration of the request, so concurrent
        payments are applied one after another. An income transaction in the
        ``fee`` category is written in the same database transaction.

        Raises:
            ValidationException: If the fee is already paid or the payment
                exceeds the outstanding balance
        """
        fee = await self._lock_student_fee(db, fee_id)

        balance = to_money(fee.amount_due) - to_money(fee.amount_paid)
        if balance <= 0:
            raise ValidationException("This fee is already fully paid")
        if data.amount > balance:
            raise ValidationException(
                [{"field": "amount", "message": f"Payment exceeds outstanding balance of {balance}"}],
                message="Payment exceeds outstanding balance",
            )

        payment_date = data.payment_date or date.today()

        fee.amount_paid = to_money(fee.amount_paid) + data.amount
        fee.payment_method = data.payment_method
        fee.transaction_reference = data.transaction_reference
        self._update_fee_status(fee, payment_date)

        names = await db.execute(
            select(Student.name, FeeStructure.fee_type)
            .join(FeeStructure, FeeStructure.id == fee.fee_structure_id)
            .where(Student.id == fee.student_id)
        )
        student_name, fee_type = names.one()

        db.add(Transaction(
            school_id=fee.school_id,
            amount=data.amount,
            type=TransactionType.INCOME.value,
            category=TransactionCategory.FEE.value,
            description=f"Fee payment: {fee_type} - {student_name}",
            payment_method=data.payment_method,
            reference=data.transaction_reference,
            transaction_date=payment_date,
            created_by=get_current_user_id_or_none(),
        ))

        await db.flush()

        logger.info(f"Recorded payment of {data.amount} on fee {fee.id} (status={fee.status})")

        return build_student_fee_response(fee, student_name, fee_type)

    async def _lock_student_fee(self, db: AsyncSession, fee_id: uuid.UUID) -> StudentFee:
        result = await db.execute(
            select(StudentFee)
            .where(
                StudentFee.id == fee_id,
                StudentFee.school_id == get_school_id(),
                StudentFee.deleted_at.is_(None),
            )
            .with_for_update()
        )
        fee = result.scalar_one_or_none()

        if not fee:
            raise NotFoundException("Student fee")

        return fee

    def _update_fee_status(self, fee: StudentFee, paid_on: date) -> None:
        paid = to_money(fee.amount_paid)
        if paid >= to_money(fee.amount_due):
            fee.status = FeeStatus.PAID.value
            fee.paid_date = paid_on
        elif paid > 0:
            fee.status = FeeStatus.PARTIAL.value
            fee.paid_date = None
        else:
            fee.status = FeeStatus.PENDING.value
            fee.paid_date = None


def get_financial_service() -> FinancialService:
    """Get financial service instance."""
    return FinancialService()
