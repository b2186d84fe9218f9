"""Account details and account update relay handlers."""

import logging
from typing import Optional

from chatfront.models.results import Redirect, Render, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError
from chatfront.validation import (
    is_strong_password,
    parse_date_of_birth,
    validate_email_field,
    validate_username_field,
)

logger = logging.getLogger(__name__)

ACCOUNT_FIELD_PATHS = (
    "/account/username",
    "/account/email",
    "/account/date-of-birth/day",
    "/account/date-of-birth/month",
    "/account/date-of-birth/year",
)
UPDATE_PATH = "/account/update"
ACCOUNT_READ_ERROR = "Error retrieving account details."


async def read_account(ctx: RelayContext, updated: bool = False) -> Render:
    """Fetch the five account fields concurrently and render the account view.

    Any failed read (or a missing upstream session) fails the whole page.
    """
    try:
        username, email, day, month, year = await ctx.client.read_many(
            ctx.credentials(), ACCOUNT_FIELD_PATHS
        )
    except UpstreamError as e:
        logger.error(f"Error retrieving account details: {e}")
        return Render("account", {"errors": [ACCOUNT_READ_ERROR], "updated": updated})

    return Render("account", {
        "username": username,
        "email": email,
        "day": day,
        "month": month,
        "year": year,
        "updated": updated,
        "errors": None,
    })


def _validate_password_change(
    password: Optional[str], confirm_password: Optional[str], errors: dict
) -> None:
    # A password change is optional, but once started both fields must be strong and match
    if not password and not confirm_password:
        return

    if not password:
        errors["password"] = "passwordRequired"
    elif not is_strong_password(password):
        errors["password"] = "passwordCriteria"

    if not confirm_password:
        errors["confirmPassword"] = "confirmPasswordRequired"
    elif not is_strong_password(confirm_password):
        errors["confirmPassword"] = "passwordCriteria"
    elif password != confirm_password:
        errors["confirmPassword"] = "passwordsMismatch"


async def update_account(
    ctx: RelayContext,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
    day: Optional[str],
    month: Optional[str],
    year: Optional[str],
) -> RelayResult:
    """Validate an account update and relay it to the upstream.

    Returns:
        Redirect to the account page with the "updated" banner, or the
        account view with field errors (401 when the upstream session is gone)
    """
    errors = {}
    validate_username_field(username, errors)
    validate_email_field(email, errors)

    date_of_birth = parse_date_of_birth(day, month, year)
    if date_of_birth is None:
        errors["dateOfBirth"] = "dobInvalid"

    _validate_password_change(password, confirm_password, errors)

    echoed = {
        "lang": ctx.lang,
        "username": username,
        "email": email,
        "day": day,
        "month": month,
        "year": year,
    }
    if errors:
        return Render("account", {**echoed, "fieldErrors": ctx.messages(errors)})

    if not ctx.bridge.get_upstream_cookie():
        return Render(
            "account",
            {**echoed, "fieldErrors": {"general": ctx.t("sessionExpired")}},
            status_code=401,
        )

    payload = {
        "username": username,
        "email": email,
        "dateOfBirth": date_of_birth,
        "password": password,
        "confirmPassword": confirm_password,
    }
    try:
        await ctx.call("POST", UPDATE_PATH, payload, requires_session=True)
    except UpstreamError as e:
        logger.error(f"Error updating account in backend: {e}")
        return Render("account", {**echoed, "fieldErrors": {"general": ctx.t("accountUpdateError")}})

    return Redirect(f"/account?updated=true&lang={ctx.lang}")
