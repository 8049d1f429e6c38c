"""Role-based permission decorators."""

from functools import wraps
from typing import Callable

from schoolbase.exceptions import ForbiddenException, UnauthorizedException
from schoolbase.models.user import Role
from schoolbase.utils.school_context import get_current_user_role


def require_role(*allowed_roles: Role | str) -> Callable:
    """Decorator that enforces role-based access control.

    Usage:
        @router.post("")
        @require_role(Role.SCHOOL_ADMIN, Role.TEACHER)
        async def create_student(...):
            ...

    Super admins pass every check.
    """
    role_values = {role.value if isinstance(role, Role) else role for role in allowed_roles}

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_role = get_current_user_role()

            if current_role is None:
                raise UnauthorizedException()

            if current_role != Role.SUPER_ADMIN.value and current_role not in role_values:
                raise ForbiddenException()

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_super_admin() -> Callable:
    """Decorator that requires SUPER_ADMIN role."""
    return require_role(Role.SUPER_ADMIN)


def require_school_admin() -> Callable:
    """Decorator that requires SCHOOL_ADMIN or SUPER_ADMIN role."""
    return require_role(Role.SCHOOL_ADMIN)


def require_staff() -> Callable:
    """Decorator that requires any staff role (TEACHER, SCHOOL_ADMIN, SUPER_ADMIN)."""
    return require_role(Role.TEACHER, Role.SCHOOL_ADMIN)


def require_authenticated() -> Callable:
    """Decorator that requires any authenticated user."""
    return require_role(*Role)
