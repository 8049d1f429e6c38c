from datetime import date, timedelta
from decimal import Decimal

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio

TODAY = date.today()


async def create_fee(client, admin, student, amount="1000.00", due_date=None):
    structure = await client.post(
        "/api/financial/fee-structures",
        json={"class_name": "Class 6", "fee_type": "Tuition", "amount": amount, "due_day": 10},
        headers=auth_headers(admin),
    )
    assert structure.status_code == 201

    fee = await client.post(
        "/api/financial/student-fees",
        json={
            "student_id": str(student.id),
            "fee_structure_id": structure.json()["data"]["id"],
            "due_date": (due_date or TODAY + timedelta(days=10)).isoformat(),
        },
        headers=auth_headers(admin),
    )
    assert fee.status_code == 201
    return fee.json()["data"]


async def pay(client, admin, fee_id, amount, **extra):
    return await client.post(
        f"/api/financial/student-fees/{fee_id}/payments",
        json={"amount": amount, **extra},
        headers=auth_headers(admin),
    )


async def test_student_fee_defaults_to_structure_amount(client, admin, student):
    fee = await create_fee(client, admin, student, amount="1500.00")

    assert Decimal(fee["amount_due"]) == Decimal("1500.00")
    assert Decimal(fee["balance"]) == Decimal("1500.00")
    assert fee["status"] == "pending"
    assert fee["student_name"] == "Rahim Uddin"
    assert fee["fee_type"] == "Tuition"


async def test_partial_then_full_payment(client, admin, student):
    fee = await create_fee(client, admin, student)

    partial = await pay(client, admin, fee["id"], "400.00", payment_method="bkash", transaction_reference="BK123")
    assert partial.status_code == 200
    data = partial.json()["data"]
    assert data["status"] == "partial"
    assert Decimal(data["balance"]) == Decimal("600.00")
    assert data["payment_method"] == "bkash"
    assert data["paid_date"] is None

    full = await pay(client, admin, fee["id"], "600.00")
    data = full.json()["data"]
    assert data["status"] == "paid"
    assert Decimal(data["balance"]) == Decimal("0.00")
    assert data["paid_date"] == TODAY.isoformat()

    again = await pay(client, admin, fee["id"], "1.00")
    assert again.status_code == 400
    assert again.json()["error"] == "This fee is already fully paid"


async def test_payment_cannot_exceed_balance(client, admin, student):
    fee = await create_fee(client, admin, student)

    response = await pay(client, admin, fee["id"], "1000.01")

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "amount"


async def test_payment_must_be_positive(client, admin, student):
    fee = await create_fee(client, admin, student)

    response = await pay(client, admin, fee["id"], "0")

    assert response.status_code == 400


async def test_payment_writes_income_transaction(client, admin, student):
    fee = await create_fee(client, admin, student)
    await pay(client, admin, fee["id"], "250.00")

    transactions = await client.get(
        "/api/financial/transactions", params={"category": "fee"}, headers=auth_headers(admin)
    )

    [transaction] = transactions.json()["data"]
    assert transaction["type"] == "income"
    assert Decimal(transaction["amount"]) == Decimal("250.00")
    assert transaction["description"] == "Fee payment: Tuition - Rahim Uddin"


async def test_overdue_fee_is_reported(client, admin, student):
    fee = await create_fee(client, admin, student, due_date=TODAY - timedelta(days=5))

    assert fee["status"] == "overdue"

    overdue = await client.get(
        "/api/financial/student-fees", params={"status": "overdue"}, headers=auth_headers(admin)
    )
    assert [f["id"] for f in overdue.json()["data"]] == [fee["id"]]

    pending = await client.get(
        "/api/financial/student-fees", params={"status": "pending"}, headers=auth_headers(admin)
    )
    assert pending.json()["data"] == []


async def test_fee_summary_for_student(client, admin, student):
    first = await create_fee(client, admin, student, amount="1000.00")
    await create_fee(client, admin, student, amount="500.00", due_date=TODAY - timedelta(days=1))
    await pay(client, admin, first["id"], "1000.00")

    response = await client.get(
        f"/api/financial/student-fees/summary/{student.id}", headers=auth_headers(admin)
    )

    summary = response.json()["data"]
    assert Decimal(summary["total_due"]) == Decimal("1500.00")
    assert Decimal(summary["total_paid"]) == Decimal("1000.00")
    assert Decimal(summary["total_balance"]) == Decimal("500.00")
    assert summary["overdue_count"] == 1


async def test_amount_due_cannot_drop_below_paid(client, admin, student):
    fee = await create_fee(client, admin, student)
    await pay(client, admin, fee["id"], "700.00")

    response = await client.patch(
        f"/api/financial/student-fees/{fee['id']}",
        json={"amount_due": "500.00"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_fee_of_other_school_is_not_found(client, admin, other_admin, student):
    fee = await create_fee(client, admin, student)

    response = await pay(client, other_admin, fee["id"], "10.00")

    assert response.status_code == 404


async def test_summary_and_transaction_crud(client, admin):
    income = await client.post(
        "/api/financial/transactions",
        json={"amount": "5000.00", "type": "income", "category": "other", "description": "Donation"},
        headers=auth_headers(admin),
    )
    assert income.status_code == 201
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "1200.00", "type": "expense", "category": "utility", "description": "Electricity"},
        headers=auth_headers(admin),
    )
    expense_id = expense.json()["data"]["id"]

    summary = await client.get("/api/financial/summary", headers=auth_headers(admin))
    data = summary.json()["data"]
    assert Decimal(data["total_income"]) == Decimal("5000.00")
    assert Decimal(data["total_expense"]) == Decimal("1200.00")
    assert Decimal(data["balance"]) == Decimal("3800.00")
    assert data["transaction_count"] == 2

    updated = await client.patch(
        f"/api/financial/transactions/{expense_id}",
        json={"amount": "1300.00"},
        headers=auth_headers(admin),
    )
    assert Decimal(updated.json()["data"]["amount"]) == Decimal("1300.00")

    deleted = await client.delete(f"/api/financial/transactions/{expense_id}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/financial/transactions/{expense_id}", headers=auth_headers(admin))
    assert missing.status_code == 404


async def test_transaction_amount_must_be_positive(client, admin):
    response = await client.post(
        "/api/financial/transactions",
        json={"amount": "-5", "type": "income", "category": "other", "description": "Negative"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_expense_counts_against_budget(client, admin):
    budget = await client.post(
        "/api/financial/budgets",
        json={
            "name": "Utilities",
            "total_amount": "10000.00",
            "category": "utility",
            "start_date": (TODAY - timedelta(days=30)).isoformat(),
            "end_date": (TODAY + timedelta(days=30)).isoformat(),
        },
        headers=auth_headers(admin),
    )
    assert budget.status_code == 201

    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "2500.00", "type": "expense", "category": "utility", "description": "Water"},
        headers=auth_headers(admin),
    )

    budgets = await client.get("/api/financial/budgets", headers=auth_headers(admin))
    [row] = budgets.json()["data"]
    assert Decimal(row["used_amount"]) == Decimal("2500.00")
    assert Decimal(row["remaining_amount"]) == Decimal("7500.00")

    await client.delete(
        f"/api/financial/transactions/{expense.json()['data']['id']}", headers=auth_headers(admin)
    )

    budgets = await client.get("/api/financial/budgets", headers=auth_headers(admin))
    assert Decimal(budgets.json()["data"][0]["used_amount"]) == Decimal("0.00")


async def test_budget_dates_validated(client, admin):
    response = await client.post(
        "/api/financial/budgets",
        json={
            "name": "Backwards",
            "total_amount": "100.00",
            "category": "other",
            "start_date": TODAY.isoformat(),
            "end_date": (TODAY - timedelta(days=1)).isoformat(),
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_teacher_cannot_see_transactions(client, teacher):
    response = await client.get("/api/financial/transactions", headers=auth_headers(teacher))

    assert response.status_code == 403


async def create_budget(client, admin, name, category="utility", days=30, total="10000.00"):
    response = await client.post(
        "/api/financial/budgets",
        json={
            "name": name,
            "total_amount": total,
            "category": category,
            "start_date": (TODAY - timedelta(days=days)).isoformat(),
            "end_date": (TODAY + timedelta(days=days)).isoformat(),
        },
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def used_by_budget(client, admin):
    budgets = await client.get("/api/financial/budgets", headers=auth_headers(admin))
    return {row["name"]: Decimal(row["used_amount"]) for row in budgets.json()["data"]}


async def test_delete_releases_the_budget_that_was_charged(client, admin):
    year = await create_budget(client, admin, "Year", days=60)
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "2500.00", "type": "expense", "category": "utility", "description": "Power"},
        headers=auth_headers(admin),
    )
    assert expense.json()["data"]["budget_id"] == year["id"]

    # A newer, narrower budget now covers the same date
    await create_budget(client, admin, "Quarter", days=10)

    await client.delete(
        f"/api/financial/transactions/{expense.json()['data']['id']}", headers=auth_headers(admin)
    )

    assert await used_by_budget(client, admin) == {
        "Year": Decimal("0.00"),
        "Quarter": Decimal("0.00"),
    }


async def test_update_moves_usage_to_the_new_category_budget(client, admin):
    await create_budget(client, admin, "Utilities", category="utility")
    await create_budget(client, admin, "Repairs", category="maintenance")
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "1200.00", "type": "expense", "category": "utility", "description": "Pipes"},
        headers=auth_headers(admin),
    )

    response = await client.patch(
        f"/api/financial/transactions/{expense.json()['data']['id']}",
        json={"category": "maintenance", "amount": "1500.00"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert await used_by_budget(client, admin) == {
        "Utilities": Decimal("0.00"),
        "Repairs": Decimal("1500.00"),
    }


async def test_update_moves_usage_between_overlapping_budgets(client, admin):
    await create_budget(client, admin, "Year", days=60)
    await create_budget(client, admin, "Quarter", days=10)
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "800.00", "type": "expense", "category": "utility", "description": "Gas"},
        headers=auth_headers(admin),
    )
    assert await used_by_budget(client, admin) == {
        "Year": Decimal("0.00"),
        "Quarter": Decimal("800.00"),
    }

    response = await client.patch(
        f"/api/financial/transactions/{expense.json()['data']['id']}",
        json={"transaction_date": (TODAY - timedelta(days=40)).isoformat()},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert await used_by_budget(client, admin) == {
        "Year": Decimal("800.00"),
        "Quarter": Decimal("0.00"),
    }


async def test_update_to_income_releases_the_budget(client, admin):
    await create_budget(client, admin, "Utilities")
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "300.00", "type": "expense", "category": "utility", "description": "Refund"},
        headers=auth_headers(admin),
    )

    response = await client.patch(
        f"/api/financial/transactions/{expense.json()['data']['id']}",
        json={"type": "income"},
        headers=auth_headers(admin),
    )

    assert response.json()["data"]["budget_id"] is None
    assert await used_by_budget(client, admin) == {"Utilities": Decimal("0.00")}


async def test_deactivating_budget_moves_its_charges(client, admin):
    await create_budget(client, admin, "Year", days=60)
    quarter = await create_budget(client, admin, "Quarter", days=10)
    expense = await client.post(
        "/api/financial/transactions",
        json={"amount": "450.00", "type": "expense", "category": "utility", "description": "Water"},
        headers=auth_headers(admin),
    )

    response = await client.patch(
        f"/api/financial/budgets/{quarter['id']}", json={"is_active": False}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert Decimal(response.json()["data"]["used_amount"]) == Decimal("0.00")
    assert await used_by_budget(client, admin) == {
        "Year": Decimal("450.00"),
        "Quarter": Decimal("0.00"),
    }

    moved = await client.get(
        f"/api/financial/transactions/{expense.json()['data']['id']}", headers=auth_headers(admin)
    )
    assert moved.json()["data"]["budget_id"] != quarter["id"]


async def test_budget_category_change_keeps_usage_consistent(client, admin):
    budget = await create_budget(client, admin, "Utilities")
    await client.post(
        "/api/financial/transactions",
        json={"amount": "700.00", "type": "expense", "category": "utility", "description": "Power"},
        headers=auth_headers(admin),
    )

    response = await client.patch(
        f"/api/financial/budgets/{budget['id']}", json={"category": "equipment"}, headers=auth_headers(admin)
    )

    assert Decimal(response.json()["data"]["used_amount"]) == Decimal("0.00")


async def test_deleting_budget_moves_its_charges(client, admin):
    await create_budget(client, admin, "Year", days=60)
    quarter = await create_budget(client, admin, "Quarter", days=10)
    await client.post(
        "/api/financial/transactions",
        json={"amount": "650.00", "type": "expense", "category": "utility", "description": "Power"},
        headers=auth_headers(admin),
    )

    response = await client.delete(f"/api/financial/budgets/{quarter['id']}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert await used_by_budget(client, admin) == {"Year": Decimal("650.00")}
