"""Authentication middleware for JWT token validation."""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from schoolbase.utils.security import decode_access_token
from schoolbase.utils.school_context import (
    clear_all_context,
    set_current_user_id,
    set_current_user_role,
    set_school_id,
)

logger = logging.getLogger(__name__)

SCHOOL_HEADER = "X-School-Id"


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts and validates JWT tokens from requests.

    Supports both the Authorization header (API clients) and the
    ``access_token`` cookie (browser SPA). Requests without a valid token pass
    through with an empty context; handlers decide whether that is allowed.
    """

    # Paths that don't require authentication
    EXEMPT_PATHS = {
        "/",
        "/health",
        "/api/docs",
        "/api/redoc",
        "/api/openapi.json",
        "/api/auth/login",
        "/api/auth/refresh",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and extract authentication context."""
        clear_all_context()

        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        token = self._extract_token(request)
        if token:
            payload = decode_access_token(token)
            if payload:
                self._set_context(request, payload)
            else:
                logger.debug(f"Rejected invalid or expired token on {request.url.path}")

        response = await call_next(request)

        clear_all_context()

        return response

    def _set_context(self, request: Request, payload: dict) -> None:
        """Populate the request context from a decoded token."""
        try:
            set_current_user_id(uuid.UUID(payload["sub"]))

            role = payload.get("role")
            if role:
                set_current_user_role(role)

            if payload.get("school_id"):
                set_school_id(uuid.UUID(payload["school_id"]))
            elif role == "SUPER_ADMIN" and request.headers.get(SCHOOL_HEADER):
                # Super admins work inside a school by naming it explicitly
                set_school_id(uuid.UUID(request.headers[SCHOOL_HEADER]))
        except (KeyError, ValueError, TypeError):
            # Malformed claims - leave the context unset
            clear_all_context()

    def _extract_token(self, request: Request) -> str | None:
        """Extract JWT token from request.

        Priority:
        1. Authorization header (Bearer token)
        2. access_token cookie
        """
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header.removeprefix("Bearer ").strip()

        return request.cookies.get("access_token")
