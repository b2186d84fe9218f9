"""Session management module for the chat front-end.

This module provides the server-side session store, the middleware that
attaches sessions to requests, and the bridge that keeps the upstream
session artifacts inside the local session.
"""

from chatfront.session.manager import (
    InMemorySessionStore,
    SessionMiddleware,
    SESSION_COOKIE_NAME,
    session_store,
    get_session,
    destroy_session,
    regenerate_session,
)
from chatfront.session.bridge import (
    SessionBridge,
    PendingReset,
)

__all__ = [
    "InMemorySessionStore",
    "SessionMiddleware",
    "SESSION_COOKIE_NAME",
    "session_store",
    "get_session",
    "destroy_session",
    "regenerate_session",
    "SessionBridge",
    "PendingReset",
]
