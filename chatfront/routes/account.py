"""Account routes: view and update account details."""

from typing import Optional
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from chatfront.models.results import Render
from chatfront.relay import account as relay_account
from chatfront.relay.context import RelayContext
from chatfront.routes.responses import get_relay_context, to_response

router = APIRouter(tags=["account"])


@router.get("/account", response_class=HTMLResponse)
async def account_page(
    request: Request,
    updated: Optional[str] = None,
    ctx: RelayContext = Depends(get_relay_context),
):
    """Render the account details page - requires authentication (handled by middleware).

    Args:
        request: Incoming request
        updated: "true" after a successful update

    Returns:
        HTML account page, never cached
    """
    result = await relay_account.read_account(ctx, updated=updated == "true")
    response = to_response(request, result)
    response.headers["Cache-Control"] = "no-store"
    return response


@router.get("/account/update", response_class=HTMLResponse)
async def update_page(request: Request):
    """Render the account update form."""
    return to_response(request, Render("update"))


@router.post("/account")
@router.post("/account/update")
async def update_account(
    request: Request,
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    confirm_password: Optional[str] = Form(None, alias="confirmPassword"),
    day: Optional[str] = Form(None, alias="date-of-birth-day"),
    month: Optional[str] = Form(None, alias="date-of-birth-month"),
    year: Optional[str] = Form(None, alias="date-of-birth-year"),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Handle account update form submission.

    Returns:
        Redirect to the account page on success, or the form with field errors
    """
    result = await relay_account.update_account(
        ctx, username, email, password, confirm_password, day, month, year
    )
    return to_response(request, result)
