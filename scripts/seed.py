#!/usr/bin/env python3
"""
Development seed data script.

Creates test data for development:
- 1 school (Sunrise Model School) with default settings
- 1 school admin, 2 teachers, 1 parent, 1 student login
- 6 students across two classes
- library books, inventory items, a transport route
- an academic year with terms, fee structures and student fees

Usage:
    python scripts/seed.py [--reset]

All test users have password: "password123"
"""

import argparse
import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from schoolbase.database import async_session_factory, engine
from schoolbase.models import (
    AcademicTerm,
    AcademicYear,
    FeeStructure,
    InventoryItem,
    LibraryBook,
    ParentStudent,
    School,
    Student,
    StudentFee,
    Teacher,
    TransportRoute,
    User,
)
from schoolbase.models.academic import AcademicYearStatus
from schoolbase.models.user import Role
from schoolbase.services.settings_service import build_default_settings
from schoolbase.utils.security import hash_password

TEST_PASSWORD = "password123"
SCHOOL_SLUG = "sunrise-model-school"

STUDENTS = [
    # code, name, class, section, roll, gender, guardian
    ("STU-001", "Rahim Uddin", "Class 6", "A", "1", "male", "Karim Uddin"),
    ("STU-002", "Fatema Akter", "Class 6", "A", "2", "female", "Abdul Hakim"),
    ("STU-003", "Tanvir Hasan", "Class 6", "B", "1", "male", "Mizanur Rahman"),
    ("STU-004", "Nusrat Jahan", "Class 7", "A", "1", "female", "Shahidul Islam"),
    ("STU-005", "Arif Hossain", "Class 7", "A", "2", "male", "Delwar Hossain"),
    ("STU-006", "Sadia Islam", "Class 7", "B", "1", "female", "Rafiqul Islam"),
]

BOOKS = [
    ("Amar Boi", "Humayun Ahmed", "Literature", 5),
    ("Basic Mathematics", "S. L. Loney", "Mathematics", 3),
    ("Physics for Beginners", "H. C. Verma", "Science", 4),
    ("History of Bengal", "R. C. Majumdar", "History", 2),
]

INVENTORY = [
    # name, category, quantity, threshold, unit price
    ("Whiteboard Marker", "Stationery", 120, 30, Decimal("25.00")),
    ("A4 Paper Ream", "Stationery", 8, 10, Decimal("450.00")),
    ("Student Desk", "Furniture", 60, 5, Decimal("3500.00")),
    ("Projector", "Electronics", 2, 1, Decimal("42000.00")),
]


def _user(school: School, email: str, first_name: str, last_name: str, role: Role, **extra) -> User:
    return User(
        school_id=school.id,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        is_active=True,
        **extra,
    )


async def seed_database(reset: bool = False) -> bool:
    """Seed a demo school. Returns True on success."""
    print("\n" + "=" * 50)
    print("SchoolBase - Development Seed Data")
    print("=" * 50 + "\n")

    async with async_session_factory() as session:
        result = await session.execute(select(School).where(School.slug == SCHOOL_SLUG))
        existing = result.scalar_one_or_none()

        if existing:
            if not reset:
                print(f"School '{SCHOOL_SLUG}' already exists. Use --reset to recreate it.")
                return False
            print("Deleting existing seed school...")
            # Every school-scoped table cascades from schools
            await session.delete(existing)
            await session.commit()

        print("Creating school: Sunrise Model School...")
        school = School(
            name="Sunrise Model School",
            slug=SCHOOL_SLUG,
            address="12 Lake Road, Dhanmondi, Dhaka",
            phone="+880 2 5555 0101",
            email="office@sunrise.edu.bd",
            principal_name="Dr. Anisur Rahman",
            established_year=1998,
            is_active=True,
        )
        session.add(school)
        await session.flush()
        session.add(build_default_settings(school))

        print("Creating staff...")
        teachers = [
            Teacher(school_id=school.id, teacher_code="TCH-001", name="Jahanara Begum",
                    subject="Mathematics", designation="Senior Teacher",
                    joining_date=date(2015, 1, 10)),
            Teacher(school_id=school.id, teacher_code="TCH-002", name="Kamal Ahmed",
                    subject="Science", designation="Assistant Teacher",
                    joining_date=date(2019, 7, 1)),
        ]
        session.add_all(teachers)
        await session.flush()

        admin = _user(school, "admin@sunrise.edu.bd", "Nasrin", "Sultana", Role.SCHOOL_ADMIN)
        teacher_users = [
            _user(school, "jahanara@sunrise.edu.bd", "Jahanara", "Begum", Role.TEACHER,
                  teacher_id=teachers[0].id),
            _user(school, "kamal@sunrise.edu.bd", "Kamal", "Ahmed", Role.TEACHER,
                  teacher_id=teachers[1].id),
        ]
        session.add(admin)
        session.add_all(teacher_users)

        print("Creating students...")
        students = []
        for code, name, class_name, section, roll, gender, guardian in STUDENTS:
            students.append(Student(
                school_id=school.id,
                student_code=code,
                name=name,
                class_name=class_name,
                section=section,
                roll_number=roll,
                gender=gender,
                guardian_name=guardian,
                guardian_relation="Father",
                admission_date=date(date.today().year, 1, 5),
            ))
        session.add_all(students)
        await session.flush()

        parent = _user(school, "karim.uddin@email.com", "Karim", "Uddin", Role.PARENT)
        student_login = _user(school, "rahim@sunrise.edu.bd", "Rahim", "Uddin", Role.STUDENT,
                              student_id=students[0].id)
        session.add_all([parent, student_login])
        await session.flush()
        session.add(ParentStudent(
            parent_id=parent.id,
            student_id=students[0].id,
            relationship_type="FATHER",
            is_primary=True,
        ))

        print("Creating library books and inventory...")
        for title, author, category, copies in BOOKS:
            session.add(LibraryBook(
                school_id=school.id,
                title=title,
                author=author,
                category=category,
                total_copies=copies,
                available_copies=copies,
            ))
        for name, category, quantity, threshold, price in INVENTORY:
            session.add(InventoryItem(
                school_id=school.id,
                name=name,
                category=category,
                current_quantity=quantity,
                minimum_threshold=threshold,
                unit_price=price,
            ))

        print("Creating transport route...")
        session.add(TransportRoute(
            school_id=school.id,
            route_name="Dhanmondi - Mohammadpur",
            pickup_points=["Dhanmondi 27", "Asad Gate", "Mohammadpur Bus Stand"],
            timings={"morning": "07:00", "afternoon": "14:00"},
            monthly_fee=Decimal("1500.00"),
        ))

        print("Creating academic year and terms...")
        year_start = date(date.today().year, 1, 1)
        year = AcademicYear(
            school_id=school.id,
            name=str(year_start.year),
            start_date=year_start,
            end_date=date(year_start.year, 12, 31),
            is_active=True,
            is_current=True,
            status=AcademicYearStatus.ACTIVE.value,
        )
        session.add(year)
        await session.flush()
        for index, (start, end) in enumerate([((1, 1), (4, 30)), ((5, 1), (8, 31)), ((9, 1), (12, 31))], start=1):
            session.add(AcademicTerm(
                school_id=school.id,
                academic_year_id=year.id,
                name=f"Term {index}",
                start_date=date(year_start.year, *start),
                end_date=date(year_start.year, *end),
            ))

        print("Creating fees...")
        fee_structures = {}
        for class_name in ("Class 6", "Class 7"):
            structure = FeeStructure(
                school_id=school.id,
                class_name=class_name,
                fee_type="Tuition",
                amount=Decimal("2500.00") if class_name == "Class 6" else Decimal("2800.00"),
                due_day=10,
                created_by=admin.id,
            )
            session.add(structure)
            fee_structures[class_name] = structure
        await session.flush()

        due_date = date.today().replace(day=10)
        for student in students:
            structure = fee_structures[student.class_name]
            session.add(StudentFee(
                school_id=school.id,
                student_id=student.id,
                fee_structure_id=structure.id,
                amount_due=structure.amount,
                due_date=due_date if due_date >= date.today() else due_date + timedelta(days=30),
                created_by=admin.id,
            ))

        await session.commit()

        print("\n" + "=" * 50)
        print("Seed Data Created Successfully!")
        print("=" * 50)
        print(f"\nSchool: {school.name} ({school.slug})")
        print(f"  ID: {school.id}")
        print(f"\nUsers (all have password: {TEST_PASSWORD}):")
        print(f"  Admin: {admin.email}")
        for user in teacher_users:
            print(f"  Teacher: {user.email}")
        print(f"  Parent: {parent.email}")
        print(f"  Student: {student_login.email}")
        print(f"\nStudents: {len(students)}")
        print(f"Books: {len(BOOKS)}  Inventory items: {len(INVENTORY)}")
        print("=" * 50 + "\n")

        return True


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed SchoolBase with development data")
    parser.add_argument("--reset", action="store_true", help="Delete and recreate the seed school")
    args = parser.parse_args()

    try:
        success = await seed_database(reset=args.reset)
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
