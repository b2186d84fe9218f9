"""Forgot-password routes.

Three forms (email, one-time password, new password) plus a resend action.
Progress between them is kept in the local session.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from chatfront.models.results import Render
from chatfront.relay import forgot_password as relay_reset
from chatfront.relay.context import RelayContext
from chatfront.routes.responses import get_relay_context, to_response

router = APIRouter(prefix="/forgot-password", tags=["forgot-password"])


@router.get("", response_class=HTMLResponse)
async def forgot_password_page(request: Request):
    """Render the email entry form."""
    return to_response(request, Render("forgot-password"))


@router.post("/enter-email")
async def enter_email(
    request: Request,
    email: Optional[str] = Form(None),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Send a reset code to the submitted email address."""
    result = await relay_reset.enter_email(ctx, email)
    return to_response(request, result)


@router.get("/verify-otp", response_class=HTMLResponse)
async def verify_otp_page(
    request: Request,
    sent: Optional[str] = None,
    ctx: RelayContext = Depends(get_relay_context),
):
    """Render the one-time password form, with a banner after a resend."""
    return to_response(request, relay_reset.show_verify_otp(ctx, sent=sent == "true"))


@router.post("/verify-otp")
async def verify_otp(
    request: Request,
    one_time_password: Optional[str] = Form(None, alias="oneTimePassword"),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Check the submitted one-time password."""
    result = await relay_reset.verify_otp(ctx, one_time_password)
    return to_response(request, result)


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_page(request: Request):
    """Render the new password form."""
    return to_response(request, Render("reset-password"))


@router.post("/reset-password")
async def reset_password(
    request: Request,
    password: Optional[str] = Form(None),
    confirm_password: Optional[str] = Form(None, alias="confirmPassword"),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Set the new password."""
    result = await relay_reset.reset_password(ctx, password, confirm_password)
    return to_response(request, result)


@router.post("/resend-otp")
async def resend_otp(request: Request, ctx: RelayContext = Depends(get_relay_context)):
    """Send a fresh one-time password to the email in the session."""
    result = await relay_reset.resend_otp(ctx)
    return to_response(request, result)
