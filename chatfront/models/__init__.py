"""Data models for the chat front-end."""

from chatfront.models.results import (
    Redirect,
    Render,
    JsonReply,
    PlainReply,
    RelayResult,
)

__all__ = [
    "Redirect",
    "Render",
    "JsonReply",
    "PlainReply",
    "RelayResult",
]
