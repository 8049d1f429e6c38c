from datetime import date, timedelta
from decimal import Decimal

import pytest

from schoolbase.models import LibraryBook, LibraryBorrowedBook
from tests.conftest import auth_headers, make_student

pytestmark = pytest.mark.anyio


async def create_book(client, user, copies=1, title="Padma Nadir Majhi"):
    response = await client.post(
        "/api/library/books",
        json={"title": title, "author": "Manik Bandopadhyay", "category": "Literature", "total_copies": copies},
        headers=auth_headers(user),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_book_starts_fully_available(client, teacher):
    book = await create_book(client, teacher, copies=3)

    assert book["total_copies"] == 3
    assert book["available_copies"] == 3
    assert book["borrowed_copies"] == 0


async def test_create_book_requires_a_copy(client, admin):
    response = await client.post(
        "/api/library/books",
        json={"title": "Empty", "author": "Nobody", "category": "None", "total_copies": 0},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_borrow_and_return(client, db, admin, school, student):
    book = await create_book(client, admin, copies=1)
    other = await make_student(db, school, "STU-2", "Fatema Akter")

    borrowed = await client.post(
        "/api/library/borrow",
        json={"book_id": book["id"], "student_id": str(student.id)},
        headers=auth_headers(admin),
    )
    assert borrowed.status_code == 201
    loan = borrowed.json()["data"]
    assert loan["status"] == "active"
    assert loan["book_title"] == "Padma Nadir Majhi"
    assert loan["student_code"] == "STU-1"
    assert loan["due_date"] == (date.today() + timedelta(days=14)).isoformat()

    after_borrow = await client.get(f"/api/library/books/{book['id']}", headers=auth_headers(admin))
    assert after_borrow.json()["data"]["available_copies"] == 0

    unavailable = await client.post(
        "/api/library/borrow",
        json={"book_id": book["id"], "student_id": str(other.id)},
        headers=auth_headers(admin),
    )
    assert unavailable.status_code == 409
    assert unavailable.json()["error"] == "Book not available"

    returned = await client.post(
        "/api/library/return", json={"borrow_id": loan["id"]}, headers=auth_headers(admin)
    )
    assert returned.status_code == 200
    data = returned.json()["data"]
    assert data["status"] == "returned"
    assert data["return_date"] == date.today().isoformat()
    assert Decimal(data["fine"]) == Decimal("0")

    after_return = await client.get(f"/api/library/books/{book['id']}", headers=auth_headers(admin))
    assert after_return.json()["data"]["available_copies"] == 1

    again = await client.post(
        "/api/library/return", json={"borrow_id": loan["id"]}, headers=auth_headers(admin)
    )
    assert again.status_code == 409


async def test_student_cannot_hold_two_copies_of_same_book(client, admin, student):
    book = await create_book(client, admin, copies=2)
    payload = {"book_id": book["id"], "student_id": str(student.id)}

    first = await client.post("/api/library/borrow", json=payload, headers=auth_headers(admin))
    second = await client.post("/api/library/borrow", json=payload, headers=auth_headers(admin))

    assert first.status_code == 201
    assert second.status_code == 409


async def test_borrow_with_past_due_date(client, admin, student):
    book = await create_book(client, admin)

    response = await client.post(
        "/api/library/borrow",
        json={
            "book_id": book["id"],
            "student_id": str(student.id),
            "due_date": (date.today() - timedelta(days=1)).isoformat(),
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_borrow_for_student_of_other_school(client, db, admin, other_school):
    book = await create_book(client, admin)
    outsider = await make_student(db, other_school, "OUT-1", "Outsider")

    response = await client.post(
        "/api/library/borrow",
        json={"book_id": book["id"], "student_id": str(outsider.id)},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404


async def test_late_return_charges_daily_fine(client, db, admin, school, student):
    book = LibraryBook(
        school_id=school.id, title="Late Book", author="A. Author", category="Fiction",
        total_copies=1, available_copies=0,
    )
    db.add(book)
    await db.flush()
    loan = LibraryBorrowedBook(
        school_id=school.id,
        book_id=book.id,
        student_id=student.id,
        borrow_date=date.today() - timedelta(days=20),
        due_date=date.today() - timedelta(days=3),
        status="active",
    )
    db.add(loan)
    await db.commit()

    overdue = await client.get(
        "/api/library/borrowed", params={"status": "overdue"}, headers=auth_headers(admin)
    )
    assert [row["id"] for row in overdue.json()["data"]] == [str(loan.id)]

    returned = await client.post(
        "/api/library/return", json={"borrow_id": str(loan.id)}, headers=auth_headers(admin)
    )

    assert returned.status_code == 200
    assert Decimal(returned.json()["data"]["fine"]) == Decimal("15.00")


async def test_return_with_waived_fine(client, db, admin, school, student):
    book = LibraryBook(
        school_id=school.id, title="Waived", author="A. Author", category="Fiction",
        total_copies=1, available_copies=0,
    )
    db.add(book)
    await db.flush()
    loan = LibraryBorrowedBook(
        school_id=school.id, book_id=book.id, student_id=student.id,
        borrow_date=date.today() - timedelta(days=30), due_date=date.today() - timedelta(days=10),
        status="active",
    )
    db.add(loan)
    await db.commit()

    returned = await client.post(
        "/api/library/return", json={"borrow_id": str(loan.id), "fine": "0"}, headers=auth_headers(admin)
    )

    assert Decimal(returned.json()["data"]["fine"]) == Decimal("0")


async def test_cannot_delete_book_on_loan(client, admin, student):
    book = await create_book(client, admin)
    await client.post(
        "/api/library/borrow",
        json={"book_id": book["id"], "student_id": str(student.id)},
        headers=auth_headers(admin),
    )

    response = await client.delete(f"/api/library/books/{book['id']}", headers=auth_headers(admin))

    assert response.status_code == 409


async def test_total_copies_cannot_drop_below_loans(client, admin, student):
    book = await create_book(client, admin, copies=2)
    await client.post(
        "/api/library/borrow",
        json={"book_id": book["id"], "student_id": str(student.id)},
        headers=auth_headers(admin),
    )

    too_low = await client.patch(
        f"/api/library/books/{book['id']}", json={"total_copies": 0}, headers=auth_headers(admin)
    )
    assert too_low.status_code == 400

    raised = await client.patch(
        f"/api/library/books/{book['id']}", json={"total_copies": 5}, headers=auth_headers(admin)
    )
    assert raised.status_code == 200
    assert raised.json()["data"]["available_copies"] == 4


async def test_library_stats(client, admin, student):
    first = await create_book(client, admin, copies=2, title="One")
    await create_book(client, admin, copies=3, title="Two")
    await client.post(
        "/api/library/borrow",
        json={"book_id": first["id"], "student_id": str(student.id)},
        headers=auth_headers(admin),
    )

    response = await client.get("/api/library/stats", headers=auth_headers(admin))

    stats = response.json()["data"]
    assert stats["total_books"] == 2
    assert stats["total_copies"] == 5
    assert stats["available_copies"] == 4
    assert stats["borrowed_copies"] == 1
    assert stats["active_loans"] == 1
    assert stats["overdue_loans"] == 0


async def test_books_are_isolated_per_school(client, admin, other_admin):
    book = await create_book(client, admin)

    listing = await client.get("/api/library/books", headers=auth_headers(other_admin))
    direct = await client.get(f"/api/library/books/{book['id']}", headers=auth_headers(other_admin))

    assert listing.json()["data"] == []
    assert direct.status_code == 404


async def test_null_clears_optional_fields_only(client, admin):
    book = await create_book(client, admin)
    await client.patch(
        f"/api/library/books/{book['id']}",
        json={"publisher": "Bengal Publishers"},
        headers=auth_headers(admin),
    )

    response = await client.patch(
        f"/api/library/books/{book['id']}",
        json={"title": None, "publisher": None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Padma Nadir Majhi"
    assert data["publisher"] is None
