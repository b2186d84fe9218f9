"""Routes package for the chat front-end."""

from chatfront.routes.auth import router as auth_router
from chatfront.routes.register import router as register_router
from chatfront.routes.account import router as account_router
from chatfront.routes.chat import router as chat_router
from chatfront.routes.contact_support import router as contact_support_router
from chatfront.routes.forgot_password import router as forgot_password_router

__all__ = [
    "auth_router",
    "register_router",
    "account_router",
    "chat_router",
    "contact_support_router",
    "forgot_password_router",
]
