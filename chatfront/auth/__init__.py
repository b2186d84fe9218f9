"""Authentication module for the chat front-end.

This module provides the guard that keeps anonymous visitors out of
protected pages.
"""

from chatfront.auth.middleware import (
    AuthMiddleware,
    PROTECTED_ROUTES,
    LOGIN_PATH,
    is_authenticated,
)

__all__ = [
    "AuthMiddleware",
    "PROTECTED_ROUTES",
    "LOGIN_PATH",
    "is_authenticated",
]
