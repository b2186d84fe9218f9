"""Relay handlers.

One handler per user-facing operation. Each reads the local session through
SessionBridge, calls the upstream through UpstreamClient and returns a
RelayResult for the routes to present.
"""
