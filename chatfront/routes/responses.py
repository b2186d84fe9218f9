"""Glue between FastAPI routes and relay handlers."""

from fastapi import Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from chatfront.i18n import get_language
from chatfront.models.results import JsonReply, PlainReply, Redirect, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.session.bridge import SessionBridge
from chatfront.session.manager import get_session
from chatfront.templates_config import templates
from chatfront.upstream.client import UpstreamClient, get_upstream_client


def get_relay_context(
    request: Request,
    client: UpstreamClient = Depends(get_upstream_client),
) -> RelayContext:
    """Build the relay context for a request (FastAPI dependency)."""
    return RelayContext(
        bridge=SessionBridge(get_session(request)),
        client=client,
        lang=get_language(request),
    )


def to_response(request: Request, result: RelayResult) -> Response:
    """Turn a relay handler's outcome into an HTTP response.

    Args:
        request: Incoming request (needed for template rendering)
        result: Outcome returned by a relay handler

    Returns:
        Redirect, JSON, plain text or rendered template response
    """
    if isinstance(result, Redirect):
        return RedirectResponse(url=result.location, status_code=result.status_code)
    if isinstance(result, JsonReply):
        return JSONResponse(content=result.payload, status_code=result.status_code)
    if isinstance(result, PlainReply):
        return PlainTextResponse(result.text, status_code=result.status_code)

    context = {"lang": get_language(request), **result.data}
    return templates.TemplateResponse(
        request,
        f"{result.view}.html",
        context,
        status_code=result.status_code,
    )
