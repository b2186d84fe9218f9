"""Authentication routes for the chat front-end.

Login relays the submitted credentials to the upstream and keeps the
upstream session cookie in the local session. Logout forgets it.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse

from chatfront.models.results import Redirect
from chatfront.relay import auth as relay_auth
from chatfront.relay.context import RelayContext
from chatfront.routes.responses import get_relay_context, to_response
from chatfront.session.manager import destroy_session, regenerate_session

router = APIRouter(tags=["authentication"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    created: Optional[str] = None,
    password_reset: Optional[str] = Query(None, alias="passwordReset"),
):
    """Render the login page.

    Args:
        request: Incoming request
        created: "true" after a successful registration
        password_reset: "true" after a successful password reset

    Returns:
        HTML login page
    """
    result = relay_auth.show_login(
        created=created == "true",
        password_reset=password_reset == "true",
    )
    return to_response(request, result)


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Handle login form submission.

    Returns:
        Redirect to chat page on success, or the login page with an error
    """
    result = await relay_auth.login(ctx, username, password)
    if isinstance(result, Redirect):
        # New principal, new session id
        regenerate_session(request)
    return to_response(request, result)


@router.get("/logout")
async def logout(request: Request, ctx: RelayContext = Depends(get_relay_context)):
    """Log out by dropping the upstream session and the local session.

    Returns:
        Redirect to login page
    """
    result = relay_auth.logout(ctx)
    destroy_session(request)
    return to_response(request, result)
