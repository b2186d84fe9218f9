"""Registration routes."""

from typing import Optional
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from chatfront.models.results import Render
from chatfront.relay import register as relay_register
from chatfront.relay.context import RelayContext
from chatfront.routes.responses import get_relay_context, to_response

router = APIRouter(tags=["registration"])


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    """Render the registration form."""
    return to_response(request, Render("register"))


@router.post("/register")
async def register(
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
    """Handle registration form submission.

    Returns:
        Redirect to login on success, or the form with field errors
    """
    result = await relay_register.register(
        ctx, username, email, password, confirm_password, day, month, year
    )
    return to_response(request, result)
