"""Server-side form validation.

The ``validate_*`` helpers record message keys (looked up in
``chatfront.i18n``) in a ``field_errors`` dict keyed by form field name.
"""

import re
import string
from datetime import datetime, UTC
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_SYMBOLS = "@$!%*?&"
PASSWORD_MIN_LENGTH = 8
DOB_MIN_YEAR = 1900


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_strong_password(password: Optional[str]) -> bool:
    """Check the password policy.

    At least 8 characters with one lowercase letter, one uppercase letter,
    one digit and one symbol from ``@$!%*?&``.
    """
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return (
        any(c in string.ascii_lowercase for c in password)
        and any(c in string.ascii_uppercase for c in password)
        and any(c in string.digits for c in password)
        and any(c in PASSWORD_SYMBOLS for c in password)
    )


def parse_date_of_birth(
    day: Optional[str],
    month: Optional[str],
    year: Optional[str],
    now: Optional[datetime] = None,
) -> Optional[str]:
    """Combine day/month/year into an ISO date string.

    Returns:
        ``YYYY-MM-DD`` when the parts form a real calendar date strictly
        before ``now`` with a year after 1900, otherwise None
    """
    parts = [(p or "").strip() for p in (day, month, year)]
    if not all(parts) or not all(p.isdigit() for p in parts):
        return None

    day_s, month_s, year_s = parts[0].zfill(2), parts[1].zfill(2), parts[2]
    try:
        dob = datetime.strptime(f"{year_s}-{month_s}-{day_s}", "%Y-%m-%d").replace(tzinfo=UTC)
    except ValueError:
        return None

    if dob.year <= DOB_MIN_YEAR:
        return None
    if dob >= (now or datetime.now(UTC)):
        return None
    return dob.strftime("%Y-%m-%d")


def validate_email_field(email: Optional[str], field_errors: dict) -> None:
    if not is_valid_email(email):
        field_errors["email"] = "emailInvalid"


def validate_username_field(username: Optional[str], field_errors: dict) -> None:
    if not (username or "").strip():
        field_errors["username"] = "usernameRequired"


def validate_confirm_password(
    password: Optional[str], confirm_password: Optional[str], field_errors: dict
) -> None:
    if not confirm_password:
        field_errors["confirmPassword"] = "confirmPasswordRequired"
    elif password != confirm_password:
        field_errors["confirmPassword"] = "passwordsMismatch"
