"""Registration relay handler."""

import logging
from typing import Optional

from chatfront.models.results import Redirect, Render, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError
from chatfront.validation import (
    is_strong_password,
    parse_date_of_birth,
    validate_confirm_password,
    validate_email_field,
    validate_username_field,
)

logger = logging.getLogger(__name__)

REGISTER_PATH = "/account/register"


async def register(
    ctx: RelayContext,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
    day: Optional[str],
    month: Optional[str],
    year: Optional[str],
) -> RelayResult:
    """Validate a registration form and relay it to the upstream.

    Returns:
        Redirect to login with the "created" banner, or the register view
        with field errors and the submitted values (passwords excluded)
    """
    errors = {}
    validate_username_field(username, errors)
    validate_email_field(email, errors)

    date_of_birth = parse_date_of_birth(day, month, year)
    if date_of_birth is None:
        errors["dateOfBirth"] = "dobInvalid"

    if not is_strong_password(password):
        errors["password"] = "passwordCriteria"
    validate_confirm_password(password, confirm_password, errors)

    echoed = {
        "lang": ctx.lang,
        "username": username,
        "email": email,
        "day": day,
        "month": month,
        "year": year,
    }
    if errors:
        return Render("register", {**echoed, "fieldErrors": ctx.messages(errors)})

    try:
        await ctx.call(
            "POST",
            REGISTER_PATH,
            {
                "username": username,
                "email": email,
                "password": password,
                "confirmPassword": confirm_password,
                "dateOfBirth": date_of_birth,
            },
        )
    except UpstreamError as e:
        logger.error(f"Registration error: {e}")
        return Render("register", {
            **echoed,
            "fieldErrors": {"general": e.user_message(ctx.t("registerError"))},
        })

    return Redirect(f"/login?created=true&lang={ctx.lang}")
