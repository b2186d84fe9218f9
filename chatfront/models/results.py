"""Outcome types returned by relay handlers.

Each relay handler returns one of these instead of an HTTP response, so the
routes decide presentation and tests can assert on plain data.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Redirect:
    """Send the browser elsewhere.

    Attributes:
        location: Target URL
        status_code: Redirect status (302 by default)
    """
    location: str
    status_code: int = 302


@dataclass(frozen=True)
class Render:
    """Render a template.

    Attributes:
        view: Template name without extension (e.g. "login")
        data: Template context; form handlers put ``fieldErrors`` and the
            echoed input here
        status_code: HTTP status of the rendered page
    """
    view: str
    data: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200


@dataclass(frozen=True)
class JsonReply:
    """Return a JSON document (chat API)."""
    payload: Any
    status_code: int = 200


@dataclass(frozen=True)
class PlainReply:
    """Return a short plain-text message."""
    text: str
    status_code: int = 200


RelayResult = Union[Redirect, Render, JsonReply, PlainReply]
