"""Upstream module for the chat front-end.

This module provides the client that relays requests to the upstream
authentication/chat backend under its CSRF and session-cookie protocol.
"""

from chatfront.upstream.client import (
    UpstreamClient,
    UpstreamCredentials,
    UpstreamResponse,
    UpstreamError,
    UpstreamUnauthorized,
    UpstreamRejected,
    UpstreamUnreachable,
    PlainBody,
    StructuredBody,
    get_upstream_client,
)

__all__ = [
    "UpstreamClient",
    "UpstreamCredentials",
    "UpstreamResponse",
    "UpstreamError",
    "UpstreamUnauthorized",
    "UpstreamRejected",
    "UpstreamUnreachable",
    "PlainBody",
    "StructuredBody",
    "get_upstream_client",
]
