"""Server-side session management for the chat front-end.

The browser only ever holds an opaque session id in an HTTP-only cookie.
Session contents, including the bridged upstream session cookie, stay in
an in-memory store inside this process.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from chatfront.config import get_config

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "chatfront_session"
DEFAULT_MAX_AGE = 60 * 60 * 4  # 4 hours


@dataclass
class StoredSession:
    """A session record held by the store.

    Attributes:
        data: Mutable session contents
        last_access: Monotonic timestamp of the last request that used it
    """
    data: dict = field(default_factory=dict)
    last_access: float = field(default_factory=time.monotonic)


class InMemorySessionStore:
    """Single-process session store keyed by session id.

    Sessions idle for longer than ``max_age`` seconds are dropped.

    Attributes:
        max_age: Idle lifetime of a session in seconds
    """

    def __init__(self, max_age: int = DEFAULT_MAX_AGE, clock: Callable[[], float] = time.monotonic):
        self.max_age = max_age
        self._clock = clock
        self._sessions: Dict[str, StoredSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def generate_session_id(self) -> str:
        """Generate a new unique session ID.

        Returns:
            UUID string for session identification
        """
        return str(uuid.uuid4())

    def create(self) -> Tuple[str, dict]:
        """Create an empty session.

        Returns:
            Tuple of (session_id, session data)
        """
        self.purge_expired()
        session_id = self.generate_session_id()
        stored = StoredSession(last_access=self._clock())
        self._sessions[session_id] = stored
        return session_id, stored.data

    def load(self, session_id: str) -> Optional[dict]:
        """Get session data for an id, refreshing its last access time.

        Returns:
            Session data, or None if the id is unknown or expired
        """
        stored = self._sessions.get(session_id)
        if stored is None:
            return None

        now = self._clock()
        if now - stored.last_access > self.max_age:
            del self._sessions[session_id]
            return None

        stored.last_access = now
        return stored.data

    def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def rotate(self, session_id: str) -> str:
        """Move a session to a freshly generated id.

        The old id stops loading. Unknown ids get an empty session under the
        new id.

        Returns:
            The new session id
        """
        stored = self._sessions.pop(session_id, None) or StoredSession()
        stored.last_access = self._clock()
        new_id = self.generate_session_id()
        self._sessions[new_id] = stored
        return new_id

    def purge_expired(self) -> int:
        """Drop expired sessions.

        Returns:
            Number of sessions removed
        """
        now = self._clock()
        expired = [
            session_id
            for session_id, stored in self._sessions.items()
            if now - stored.last_access > self.max_age
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.debug(f"Purged {len(expired)} expired sessions")
        return len(expired)


# Default store shared by the application
session_store = InMemorySessionStore()


class SessionMiddleware(BaseHTTPMiddleware):
    """Attaches the local session to ``request.state`` for every request.

    This middleware:
    - Loads the session named by the session cookie, or creates a new one
    - Exposes it as ``request.state.session`` (and its id as ``request.state.session_id``)
    - Refreshes the session cookie on the response, or deletes it when the
      handler destroyed the session
    - Moves the session to a new id when the handler asked for it (login)

    Attributes:
        store: Session store backing the middleware
    """

    def __init__(self, app, store: Optional[InMemorySessionStore] = None):
        super().__init__(app)
        self.store = store or session_store

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        session_id = request.cookies.get(SESSION_COOKIE_NAME)
        session = self.store.load(session_id) if session_id else None
        if session is None:
            session_id, session = self.store.create()

        request.state.session_id = session_id
        request.state.session = session
        request.state.session_destroyed = False
        request.state.session_regenerated = False

        response: Response = await call_next(request)

        if request.state.session_destroyed:
            self.store.destroy(session_id)
            response.delete_cookie(SESSION_COOKIE_NAME, path="/")
            return response

        if request.state.session_regenerated:
            session_id = self.store.rotate(session_id)

        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=session_id,
            max_age=self.store.max_age,
            httponly=True,
            secure=get_config().cookie_secure,
            samesite="lax",
            path="/",
        )
        return response


def get_session(request: Request) -> dict:
    """Get the local session attached by SessionMiddleware.

    Raises:
        ValueError: If no session is attached to the request
    """
    session = getattr(request.state, "session", None)
    if session is None:
        raise ValueError("No session found in request")
    return session


def destroy_session(request: Request) -> None:
    """Empty the local session and have the middleware drop it."""
    get_session(request).clear()
    request.state.session_destroyed = True


def regenerate_session(request: Request) -> None:
    """Have the middleware issue a new session id, keeping the contents."""
    get_session(request)
    request.state.session_regenerated = True
