"""Main FastAPI application entry point for the chat front-end."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from fastapi.responses import RedirectResponse
from pathlib import Path
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

# Load environment variables from .env file
load_dotenv()

from chatfront import __version__
from chatfront.config import get_config, validate_config, ConfigurationError
from chatfront.auth.middleware import AuthMiddleware
from chatfront.logger import setup_logger
from chatfront.models.results import Render
from chatfront.routes import (
    auth_router,
    register_router,
    account_router,
    chat_router,
    contact_support_router,
    forgot_password_router,
)
from chatfront.routes.responses import to_response
from chatfront.session.manager import SessionMiddleware, session_store

logger = logging.getLogger(__name__)

# Set up paths
BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"

NO_CACHE = "no-cache, max-age=0, must-revalidate, no-store"
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    try:
        validate_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        raise

    config = get_config()
    setup_logger("chatfront", config.log_level)
    session_store.max_age = config.session_max_age
    logger.info(
        f"Starting chat front-end ({config.app_env}) at {config.app_url}; upstream {config.upstream_base_url}, "
        f"timeout {config.upstream_timeout or 'none'}"
    )

    yield

    logger.info("Chat front-end shutting down")


# Initialize FastAPI app
app = FastAPI(
    title="Chat Front-end",
    description="Server-rendered front-end relaying to the upstream auth/chat backend",
    version=__version__,
    lifespan=lifespan,
)

# Add proxy headers middleware (for reverse proxy HTTPS handling)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

# Authentication guard runs inside the session middleware, which must wrap it
app.add_middleware(AuthMiddleware)
app.add_middleware(SessionMiddleware, store=session_store)


@app.middleware("http")
async def no_cache_headers(request: Request, call_next):
    """Disable caching and add basic hardening headers to every response."""
    response = await call_next(request)
    response.headers["Cache-Control"] = NO_CACHE
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# Include routers
app.include_router(auth_router)
app.include_router(register_router)
app.include_router(account_router)
app.include_router(chat_router)
app.include_router(contact_support_router)
app.include_router(forgot_password_router)

# Mount static files if directory exists
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Render the not-found page for unmatched paths."""
    if exc.status_code == 404:
        return to_response(request, Render("not-found", status_code=404))
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Log unexpected errors and render the generic error page."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)

    status_code = getattr(exc, "status_code", None) or getattr(exc, "status", None) or 500
    if not isinstance(status_code, int) or not 400 <= status_code <= 599:
        status_code = 500

    dev_mode = get_config().dev_mode
    return to_response(request, Render(
        "error",
        {
            "message": str(exc) if dev_mode else None,
            "status_code": status_code,
        },
        status_code=status_code,
    ))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint - redirects to chat (or login, via the guard)."""
    return RedirectResponse(url="/chat", status_code=302)
