"""English and Welsh message catalogues.

The browser picks its language with a ``lang`` cookie. Anything other than
``cy`` is treated as English.
"""

from fastapi import Request

LANG_COOKIE_NAME = "lang"
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "cy")

MESSAGES = {
    "en": {
        "loginInvalidCredentials": "Invalid username or password.",
        "usernameRequired": "Enter your username.",
        "emailInvalid": "Enter a valid email address.",
        "dobInvalid": "Enter a valid date of birth in the past.",
        "passwordRequired": "Enter a password.",
        "passwordCriteria": (
            "Password must be at least 8 characters and include an uppercase letter, "
            "a lowercase letter, a number and a special character (@$!%*?&)."
        ),
        "confirmPasswordRequired": "Confirm your password.",
        "passwordsMismatch": "Passwords do not match.",
        "registerError": "Registration failed. Please try again.",
        "sessionExpired": "Your session has expired. Please log in again.",
        "accountUpdateError": "There was a problem updating your account. Please try again.",
        "forgotPasswordError": "We could not send a code to that email address. Please try again.",
        "noEmailInSession": "Your reset session has expired. Please start again.",
        "otpRequired": "Enter the code we sent to your email.",
        "otpVerifyError": "The code is invalid or has expired.",
        "resetSessionMissing": "Your reset session has expired. Please start again.",
        "resetError": "We could not reset your password. Please try again.",
    },
    "cy": {
        "loginInvalidCredentials": "Enw defnyddiwr neu gyfrinair annilys.",
        "usernameRequired": "Rhowch eich enw defnyddiwr.",
        "emailInvalid": "Rhowch gyfeiriad e-bost dilys.",
        "dobInvalid": "Rhowch ddyddiad geni dilys yn y gorffennol.",
        "passwordRequired": "Rhowch gyfrinair.",
        "passwordCriteria": (
            "Rhaid i'r cyfrinair fod o leiaf 8 nod a chynnwys llythyren fawr, "
            "llythyren fach, rhif a nod arbennig (@$!%*?&)."
        ),
        "confirmPasswordRequired": "Cadarnhewch eich cyfrinair.",
        "passwordsMismatch": "Nid yw'r cyfrineiriau'n cyfateb.",
        "registerError": "Methodd y cofrestru. Rhowch gynnig arall arni.",
        "sessionExpired": "Mae eich sesiwn wedi dod i ben. Mewngofnodwch eto.",
        "accountUpdateError": "Roedd problem wrth ddiweddaru eich cyfrif. Rhowch gynnig arall arni.",
        "forgotPasswordError": "Nid oeddem yn gallu anfon cod i'r cyfeiriad e-bost hwnnw. Rhowch gynnig arall arni.",
        "noEmailInSession": "Mae eich sesiwn ailosod wedi dod i ben. Dechreuwch eto.",
        "otpRequired": "Rhowch y cod a anfonwyd i'ch e-bost.",
        "otpVerifyError": "Mae'r cod yn annilys neu wedi dod i ben.",
        "resetSessionMissing": "Mae eich sesiwn ailosod wedi dod i ben. Dechreuwch eto.",
        "resetError": "Nid oeddem yn gallu ailosod eich cyfrinair. Rhowch gynnig arall arni.",
    },
}


def normalize_language(value: str | None) -> str:
    return "cy" if value == "cy" else DEFAULT_LANGUAGE


def get_language(request: Request) -> str:
    """Language preference from the request's ``lang`` cookie."""
    return normalize_language(request.cookies.get(LANG_COOKIE_NAME))


def translate(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    """Look up a message, falling back to English and then to the key itself."""
    catalogue = MESSAGES.get(lang, MESSAGES[DEFAULT_LANGUAGE])
    if key in catalogue:
        return catalogue[key]
    return MESSAGES[DEFAULT_LANGUAGE].get(key, key)
