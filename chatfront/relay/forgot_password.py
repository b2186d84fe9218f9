"""Forgot-password relay handlers.

The flow moves through Start -> EmailEntered -> OtpVerified -> PasswordReset.
The local session remembers the email (EmailEntered) and the accepted
one-time password (OtpVerified). A successful reset leaves both in place;
whether a reused OTP is refused is up to the upstream.
"""

import logging
from typing import Optional

from chatfront.models.results import Redirect, Render, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError
from chatfront.validation import (
    is_strong_password,
    is_valid_email,
    validate_confirm_password,
    validate_email_field,
)

logger = logging.getLogger(__name__)

ENTER_EMAIL_PATH = "/forgot-password/enter-email"
VERIFY_OTP_PATH = "/forgot-password/verify-otp"
RESET_PASSWORD_PATH = "/forgot-password/reset-password"
RESEND_OTP_PATH = "/forgot-password/resend-otp"

NO_VALID_EMAIL = "No valid email found. Please start the reset process again."
RESEND_ERROR = "An error occurred while resending the OTP. Please try again."


def show_verify_otp(ctx: RelayContext, sent: bool = False) -> Render:
    return Render("verify-otp", {
        "lang": ctx.lang,
        "sent": sent,
        "fieldErrors": {},
        "oneTimePassword": "",
    })


async def enter_email(ctx: RelayContext, email: Optional[str]) -> RelayResult:
    """Start -> EmailEntered: ask the upstream to send a reset code."""
    errors = {}
    validate_email_field(email, errors)
    if errors:
        return Render("forgot-password", {
            "lang": ctx.lang,
            "fieldErrors": ctx.messages(errors),
            "email": email,
        })

    try:
        await ctx.call("POST", ENTER_EMAIL_PATH, {"email": email})
    except UpstreamError as e:
        logger.error(f"Forgot-password enter-email error: {e}")
        return Render("forgot-password", {
            "lang": ctx.lang,
            "fieldErrors": {"general": e.user_message(ctx.t("forgotPasswordError"))},
            "email": email,
        })

    ctx.bridge.set_pending_reset(email)
    return Redirect(f"/forgot-password/verify-otp?lang={ctx.lang}")


async def verify_otp(ctx: RelayContext, one_time_password: Optional[str]) -> RelayResult:
    """EmailEntered -> OtpVerified: check the code with the upstream."""
    pending = ctx.bridge.get_pending_reset()

    errors = {}
    if pending is None:
        errors["general"] = "noEmailInSession"
    if not (one_time_password or "").strip():
        errors["oneTimePassword"] = "otpRequired"

    if errors:
        return Render("verify-otp", {
            "lang": ctx.lang,
            "sent": False,
            "fieldErrors": ctx.messages(errors),
            "oneTimePassword": one_time_password,
        })

    try:
        await ctx.call(
            "POST",
            VERIFY_OTP_PATH,
            {"email": pending.email, "otp": one_time_password},
        )
    except UpstreamError as e:
        logger.error(f"Forgot-password verify-otp error: {e}")
        return Render("verify-otp", {
            "lang": ctx.lang,
            "sent": False,
            "fieldErrors": {"general": e.user_message(ctx.t("otpVerifyError"))},
            "oneTimePassword": one_time_password,
        })

    ctx.bridge.mark_otp_verified(one_time_password)
    return Redirect(f"/forgot-password/reset-password?lang={ctx.lang}")


async def reset_password(
    ctx: RelayContext, password: Optional[str], confirm_password: Optional[str]
) -> RelayResult:
    """OtpVerified -> PasswordReset: set the new password upstream."""
    pending = ctx.bridge.get_pending_reset()

    errors = {}
    if not password:
        errors["password"] = "passwordRequired"
    elif not is_strong_password(password):
        errors["password"] = "passwordCriteria"
    validate_confirm_password(password, confirm_password, errors)

    if pending is None or not pending.otp_verified:
        errors["general"] = "resetSessionMissing"

    if errors:
        return Render("reset-password", {"lang": ctx.lang, "fieldErrors": ctx.messages(errors)})

    try:
        await ctx.call(
            "POST",
            RESET_PASSWORD_PATH,
            {
                "email": pending.email,
                "otp": pending.otp_verified,
                "password": password,
                "confirmPassword": confirm_password,
            },
        )
    except UpstreamError as e:
        logger.error(f"Forgot-password reset error: {e}")
        return Render("reset-password", {
            "lang": ctx.lang,
            "fieldErrors": {"general": e.user_message(ctx.t("resetError"))},
        })

    return Redirect(f"/login?passwordReset=true&lang={ctx.lang}")


async def resend_otp(ctx: RelayContext) -> RelayResult:
    """Ask the upstream to send a fresh code without changing state."""
    pending = ctx.bridge.get_pending_reset()
    if pending is None or not is_valid_email(pending.email):
        logger.info("Resend OTP requested without a valid email in session")
        return Render("verify-otp", {**show_verify_otp(ctx).data, "error": NO_VALID_EMAIL})

    try:
        await ctx.call("POST", RESEND_OTP_PATH, {"email": pending.email})
    except UpstreamError as e:
        logger.error(f"Forgot-password resend-otp error: {e}")
        return Render("verify-otp", {**show_verify_otp(ctx).data, "error": e.user_message(RESEND_ERROR)})

    return Redirect(f"/forgot-password/verify-otp?sent=true&lang={ctx.lang}")
