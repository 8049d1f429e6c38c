"""School (tenant) context management using contextvars.

This module provides request-scoped context variables for tracking the current
school, user, and role throughout a request lifecycle.
"""

import contextvars
import uuid

from schoolbase.exceptions import SchoolContextError, UserContextError

# Context variables for request-scoped data
_school_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "school_id", default=None
)
_current_user_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "current_user_id", default=None
)
_current_user_role: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "current_user_role", default=None
)


# === School Context ===

def get_school_id() -> uuid.UUID:
    """Get the current school ID.

    Returns:
        The current school's UUID

    Raises:
        SchoolContextError: If school context is not set
    """
    sid = _school_id.get()
    if sid is None:
        raise SchoolContextError("School context is not set")
    return sid


def set_school_id(sid: uuid.UUID | None) -> None:
    """Set the current school ID."""
    _school_id.set(sid)


# === User Context ===

def get_current_user_id() -> uuid.UUID:
    """Get the current user ID.

    Raises:
        UserContextError: If user context is not set
    """
    uid = _current_user_id.get()
    if uid is None:
        raise UserContextError("User context is not set")
    return uid


def get_current_user_id_or_none() -> uuid.UUID | None:
    """Get the current user ID or None if not set."""
    return _current_user_id.get()


def set_current_user_id(uid: uuid.UUID | None) -> None:
    """Set the current user ID."""
    _current_user_id.set(uid)


# === Role Context ===

def get_current_user_role() -> str | None:
    """Get the current user's role."""
    return _current_user_role.get()


def set_current_user_role(role: str | None) -> None:
    """Set the current user's role."""
    _current_user_role.set(role)


def clear_all_context() -> None:
    """Clear all context variables.

    Call this at the end of each request to prevent context leakage.
    """
    _school_id.set(None)
    _current_user_id.set(None)
    _current_user_role.set(None)


def is_super_admin() -> bool:
    """Check if the current user is a super admin."""
    return get_current_user_role() == "SUPER_ADMIN"


def is_staff() -> bool:
    """Check if the current user is staff (admin or teacher)."""
    return get_current_user_role() in ("SUPER_ADMIN", "SCHOOL_ADMIN", "TEACHER")
