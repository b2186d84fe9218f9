"""Authentication guard for protected pages.

Protected pages redirect to the login view when the local session carries
no signed-in principal. This is a soft redirect; the upstream still checks
its own session cookie on every relayed call.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from chatfront.session.bridge import SessionBridge

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

# Pages that require a signed-in principal (GET only)
PROTECTED_ROUTES = {
    "/chat",
    "/chat-history",
    "/open-chat-history",
    "/delete-chat-history",
    "/account",
    "/account/update",
    "/contact-support",
}


def is_authenticated(session: dict) -> bool:
    """True iff the session carries a principal set by a successful login."""
    return SessionBridge(session).is_authenticated()


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware for redirecting anonymous visitors away from protected pages.

    Must run inside SessionMiddleware, which attaches ``request.state.session``.
    JSON and form submissions are left to their handlers, which answer with a
    session-expired outcome instead of a redirect.
    """

    def _is_protected_route(self, request: Request) -> bool:
        """Check if a request targets a protected page.

        Args:
            request: Incoming request

        Returns:
            True if the request is a GET for a protected path
        """
        if request.method not in ("GET", "HEAD"):
            return False
        return request.url.path.rstrip("/") in PROTECTED_ROUTES

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through the authentication guard.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from handler or redirect to login
        """
        if not self._is_protected_route(request):
            return await call_next(request)

        session = getattr(request.state, "session", None) or {}
        if not is_authenticated(session):
            logger.info(f"Anonymous request for {request.url.path}; redirecting to login")
            return RedirectResponse(url=LOGIN_PATH, status_code=302)

        return await call_next(request)
