"""Shared fixtures: an in-memory database, the app under test and users per role."""

import os

os.environ["APP_ENV"] = "test"
os.environ["APP_SECRET_KEY"] = "test-secret-key-not-for-production-use"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from schoolbase.database import get_db
from schoolbase.main import app
from schoolbase.models import Base, ParentStudent, School, Student, Teacher, User
from schoolbase.models.user import Role
from schoolbase.utils.security import create_access_token, hash_password

TEST_PASSWORD = "password123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging rows directly, outside the API."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User, school_id: uuid.UUID | None = None) -> dict[str, str]:
    """Bearer header for a user; ``school_id`` adds the super admin school header."""
    token = create_access_token(
        user_id=user.id,
        school_id=user.school_id,
        role=user.role,
        name=user.full_name,
    )
    headers = {"Authorization": f"Bearer {token}"}
    if school_id is not None:
        headers["X-School-Id"] = str(school_id)
    return headers


async def make_school(db: AsyncSession, slug: str, name: str | None = None) -> School:
    school = School(name=name or slug.replace("-", " ").title(), slug=slug, is_active=True)
    db.add(school)
    await db.commit()
    return school


async def make_user(
    db: AsyncSession,
    school: School | None,
    role: Role,
    email: str,
    first_name: str = "Test",
    last_name: str = "User",
    **extra,
) -> User:
    extra.setdefault("is_active", True)
    user = User(
        school_id=school.id if school else None,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        **extra,
    )
    db.add(user)
    await db.commit()
    return user


async def make_student(
    db: AsyncSession, school: School, code: str, name: str = "Test Student", **extra
) -> Student:
    student = Student(school_id=school.id, student_code=code, name=name, **extra)
    db.add(student)
    await db.commit()
    return student


@pytest.fixture
async def school(db) -> School:
    return await make_school(db, "green-valley", "Green Valley School")


@pytest.fixture
async def other_school(db) -> School:
    return await make_school(db, "river-side", "River Side School")


@pytest.fixture
async def super_admin(db) -> User:
    return await make_user(db, None, Role.SUPER_ADMIN, "root@schoolbase.app", "Super", "Admin")


@pytest.fixture
async def admin(db, school) -> User:
    return await make_user(db, school, Role.SCHOOL_ADMIN, "admin@greenvalley.edu", "Amina", "Khatun")


@pytest.fixture
async def other_admin(db, other_school) -> User:
    return await make_user(db, other_school, Role.SCHOOL_ADMIN, "admin@riverside.edu", "Rafi", "Ahmed")


@pytest.fixture
async def teacher_record(db, school) -> Teacher:
    teacher = Teacher(school_id=school.id, teacher_code="TCH-1", name="Selina Parvin", subject="Math")
    db.add(teacher)
    await db.commit()
    return teacher


@pytest.fixture
async def teacher(db, school, teacher_record) -> User:
    return await make_user(
        db, school, Role.TEACHER, "selina@greenvalley.edu", "Selina", "Parvin",
        teacher_id=teacher_record.id,
    )


@pytest.fixture
async def student(db, school) -> Student:
    return await make_student(db, school, "STU-1", "Rahim Uddin", class_name="Class 6", section="A")


@pytest.fixture
async def student_user(db, school, student) -> User:
    return await make_user(
        db, school, Role.STUDENT, "rahim@greenvalley.edu", "Rahim", "Uddin", student_id=student.id
    )


@pytest.fixture
async def parent(db, school, student) -> User:
    user = await make_user(db, school, Role.PARENT, "karim@greenvalley.edu", "Karim", "Uddin")
    db.add(ParentStudent(parent_id=user.id, student_id=student.id, relationship_type="FATHER", is_primary=True))
    await db.commit()
    return user
