"""Server-rendered chat front-end relaying to an upstream auth/chat backend."""

__version__ = "0.1.0"
