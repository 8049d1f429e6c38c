#!/usr/bin/env python3
"""
CLI script to create a platform super admin.

Usage (interactive):
    python scripts/create_super_admin.py

Usage (non-interactive, for deployments):
    python scripts/create_super_admin.py --email admin@example.com --password yourpassword
"""

import argparse
import asyncio
import sys
from getpass import getpass
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from schoolbase.database import async_session_factory, engine
from schoolbase.models import User
from schoolbase.models.user import Role
from schoolbase.utils.security import hash_password

MIN_PASSWORD_LENGTH = 8


def _prompt_password() -> str | None:
    while True:
        password = getpass(f"Enter password (min {MIN_PASSWORD_LENGTH} characters): ")
        if len(password) >= MIN_PASSWORD_LENGTH:
            break
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    if getpass("Confirm password: ") != password:
        print("\nPasswords do not match. Aborting.")
        return None
    return password


async def create_super_admin(
    email: str | None = None,
    password: str | None = None,
    first_name: str = "Super",
    last_name: str = "Admin",
    force: bool = False,
) -> bool:
    """Create a super admin user. Returns True on success."""
    print("\n" + "=" * 50)
    print("SchoolBase - Super Admin Setup")
    print("=" * 50 + "\n")

    if not email:
        email = input("Enter email address: ")
    email = email.strip().lower()
    if "@" not in email or "." not in email:
        print("Invalid email address.")
        return False

    if not password:
        password = _prompt_password()
        if password is None:
            return False
    elif len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        return False

    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(
                User.role == Role.SUPER_ADMIN.value,
                User.deleted_at.is_(None),
            )
        )
        existing = result.scalars().first()
        if existing and not force:
            print(f"\nA super admin already exists: {existing.email}")
            print("Use --force to create another super admin.")
            return False

        result = await session.execute(
            select(User).where(
                User.email == email,
                User.school_id.is_(None),
                User.deleted_at.is_(None),
            )
        )
        if result.scalar_one_or_none():
            print(f"\nUser with email {email} already exists.")
            return False

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.SUPER_ADMIN.value,
            school_id=None,  # Super admins are not bound to a school
            is_active=True,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)

        print("\n" + "=" * 50)
        print("Super Admin Created Successfully!")
        print("=" * 50)
        print(f"  Email: {user.email}")
        print(f"  Name: {user.full_name}")
        print(f"  ID: {user.id}")
        print("=" * 50 + "\n")

        return True


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a SchoolBase super admin user")
    parser.add_argument("--email", "-e", help="Admin email address")
    parser.add_argument("--password", "-p", help=f"Admin password (min {MIN_PASSWORD_LENGTH} chars)")
    parser.add_argument("--first-name", "-f", help="First name", default="Super")
    parser.add_argument("--last-name", "-l", help="Last name", default="Admin")
    parser.add_argument("--force", action="store_true", help="Create even if a super admin exists")
    args = parser.parse_args()

    try:
        success = await create_super_admin(
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            force=args.force,
        )
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
