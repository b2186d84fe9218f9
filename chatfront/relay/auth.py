"""Login and logout relay handlers."""

import logging

from chatfront.models.results import Redirect, Render, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login/chat"


def show_login(created: bool = False, password_reset: bool = False) -> Render:
    return Render("login", {"created": created, "passwordReset": password_reset})


async def login(ctx: RelayContext, username: str, password: str) -> RelayResult:
    """Sign in with the upstream and bridge its session cookie.

    On success the joined Set-Cookie value and the CSRF token of the call
    are stored in the local session and the principal is signed in. On
    failure the session is left untouched.

    Args:
        ctx: Relay context for the request
        username: Submitted username
        password: Submitted password

    Returns:
        Redirect to the chat page, or the login view with an error
    """
    try:
        result = await ctx.client.call(
            ctx.credentials(),
            "POST",
            LOGIN_PATH,
            {"username": username, "password": password},
        )
    except UpstreamError as e:
        logger.error(f"Login failed for {username!r}: {e}")
        return Render("login", {
            "error": e.user_message(ctx.t("loginInvalidCredentials")),
            "username": username,
        })

    if not result.set_cookie:
        logger.warning(f"Upstream login for {username!r} returned no session cookie")

    ctx.bridge.sign_in(username, result.set_cookie, result.csrf_token)
    logger.info(f"User {username!r} signed in")
    return Redirect("/chat")


def logout(ctx: RelayContext) -> Redirect:
    """Forget the upstream session; the caller destroys the local session."""
    principal = ctx.bridge.principal() or {}
    ctx.bridge.clear()
    logger.info(f"User {principal.get('username', 'anonymous')!r} signed out")
    return Redirect("/login")
