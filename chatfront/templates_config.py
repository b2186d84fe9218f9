"""Shared Jinja2 templates configuration.

This module provides a centralized templates instance with the message
lookup helper injected as a global, so every page can translate strings.
"""

from pathlib import Path
from fastapi.templating import Jinja2Templates

from chatfront.i18n import translate

# Set up templates directory
BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

# Create shared templates instance
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

APP_TITLE = "Chat Assistant"

templates.env.globals.update({
    "app_title": APP_TITLE,
    "t": translate,
})
