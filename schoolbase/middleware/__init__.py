"""Middleware components."""

from schoolbase.middleware.auth import AuthMiddleware

__all__ = ["AuthMiddleware"]
