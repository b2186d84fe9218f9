"""Bridge between the local session and the upstream session artifacts.

All reads and writes of upstream-related session fields go through
SessionBridge. Two scopes may hold the upstream cookie: the signed-in
principal record (``session["user"]``) and the session itself. The
principal scope takes precedence.
"""

from dataclasses import dataclass
from typing import Optional

USER_KEY = "user"
UPSTREAM_COOKIE_KEY = "upstream_session_cookie"
CSRF_TOKEN_KEY = "csrf_token"
PENDING_RESET_EMAIL_KEY = "pending_reset_email"
PENDING_RESET_OTP_KEY = "pending_reset_otp"

UPSTREAM_KEYS = (UPSTREAM_COOKIE_KEY, CSRF_TOKEN_KEY)


@dataclass(frozen=True)
class PendingReset:
    """Progress through the forgot-password flow.

    Attributes:
        email: Email address the reset code was sent to
        otp_verified: The one-time password the upstream accepted, if any
    """
    email: str
    otp_verified: Optional[str] = None


class SessionBridge:
    """Accessor for the upstream fields of one local session.

    None of the operations fail; callers decide what a missing value means.
    """

    def __init__(self, session: dict):
        self.session = session

    def principal(self) -> Optional[dict]:
        user = self.session.get(USER_KEY)
        return user if isinstance(user, dict) else None

    def is_authenticated(self) -> bool:
        return self.principal() is not None

    def get_upstream_cookie(self) -> Optional[str]:
        """Bridged upstream cookie, principal scope first, then session scope."""
        principal = self.principal() or {}
        return principal.get(UPSTREAM_COOKIE_KEY) or self.session.get(UPSTREAM_COOKIE_KEY) or None

    def set_upstream_cookie(self, value: str) -> None:
        self.session[UPSTREAM_COOKIE_KEY] = value

    def get_csrf_token(self) -> Optional[str]:
        principal = self.principal() or {}
        return principal.get(CSRF_TOKEN_KEY) or self.session.get(CSRF_TOKEN_KEY) or None

    def set_csrf_token(self, token: str) -> None:
        """Store the latest token in both scopes so the principal copy stays current."""
        self.session[CSRF_TOKEN_KEY] = token
        principal = self.principal()
        if principal is not None:
            principal[CSRF_TOKEN_KEY] = token

    def sign_in(self, username: str, upstream_cookie: Optional[str], csrf_token: Optional[str]) -> None:
        """Record the principal established by a successful upstream login.

        Replaces any earlier login state in both scopes.
        """
        self.session[UPSTREAM_COOKIE_KEY] = upstream_cookie
        self.session[CSRF_TOKEN_KEY] = csrf_token
        self.session[USER_KEY] = {
            "username": username,
            UPSTREAM_COOKIE_KEY: upstream_cookie,
            CSRF_TOKEN_KEY: csrf_token,
        }

    def clear(self) -> None:
        """Remove the principal and all upstream fields."""
        self.session.pop(USER_KEY, None)
        for key in UPSTREAM_KEYS:
            self.session.pop(key, None)

    def set_pending_reset(self, email: str) -> None:
        self.session[PENDING_RESET_EMAIL_KEY] = email

    def mark_otp_verified(self, otp: str) -> None:
        self.session[PENDING_RESET_OTP_KEY] = otp

    def get_pending_reset(self) -> Optional[PendingReset]:
        email = self.session.get(PENDING_RESET_EMAIL_KEY)
        if not email:
            return None
        return PendingReset(email=email, otp_verified=self.session.get(PENDING_RESET_OTP_KEY))

    def clear_pending_reset(self) -> None:
        self.session.pop(PENDING_RESET_EMAIL_KEY, None)
        self.session.pop(PENDING_RESET_OTP_KEY, None)
