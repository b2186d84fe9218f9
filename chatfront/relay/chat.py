"""Chat relay handlers: sending messages and managing chat history."""

import logging
from typing import Any, Optional
from urllib.parse import quote

from chatfront.models.results import JsonReply, PlainReply, Redirect, Render, RelayResult
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError, UpstreamUnauthorized

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired or invalid. Please log in again."
CHAT_SEND_ERROR = "An error occurred while sending the chat message. Please try again later."
HISTORY_LOAD_ERROR = "Unable to load chat history at this time."
MISSING_CHAT_ID = "Missing chatId parameter."
INVALID_CHAT_ID = "Invalid chatId parameter."
NOT_AUTHENTICATED = "User not authenticated or session expired."
OPEN_HISTORY_ERROR = "Error retrieving chat history."
DELETE_ERROR = "An error occurred while deleting the chat."


async def send_message(ctx: RelayContext, message: Optional[str], chat_id: Any = None) -> JsonReply:
    """Relay a chat message and return the upstream reply as JSON.

    Args:
        ctx: Relay context for the request
        message: Message text
        chat_id: Existing conversation id, None to start a new one

    Returns:
        200 with ``{chatId, message}`` from the upstream, 401 when the
        upstream session is missing or rejected, 500 on any other failure
    """
    if not ctx.bridge.get_upstream_cookie():
        return JsonReply({"error": SESSION_EXPIRED_MESSAGE}, status_code=401)

    try:
        result = await ctx.call(
            "POST",
            "/chat",
            {"message": message, "chatId": chat_id},
            requires_session=True,
        )
    except UpstreamUnauthorized as e:
        logger.warning(f"Upstream rejected chat session: {e}")
        return JsonReply({"error": SESSION_EXPIRED_MESSAGE}, status_code=401)
    except UpstreamError as e:
        logger.error(f"Error sending chat message to backend: {e}")
        return JsonReply({"error": CHAT_SEND_ERROR}, status_code=500)

    return JsonReply(result.data, status_code=200)


async def read_history(ctx: RelayContext, deleted: bool = False) -> Render:
    """List the user's chats; failures render an empty list with an error."""
    try:
        result = await ctx.call("GET", "/chat/chats", requires_session=True)
    except UpstreamError as e:
        logger.error(f"Error fetching chat histories: {e}")
        return Render("chat-history", {"chats": [], "error": HISTORY_LOAD_ERROR, "deleted": deleted})

    return Render("chat-history", {"chats": result.data or [], "deleted": deleted})


async def open_history(ctx: RelayContext, chat_id_param: Optional[str]) -> RelayResult:
    """Load the messages of one chat into the chat view."""
    if not chat_id_param:
        return PlainReply(MISSING_CHAT_ID, status_code=400)
    try:
        chat_id = int(chat_id_param)
    except ValueError:
        return PlainReply(INVALID_CHAT_ID, status_code=400)

    if not ctx.bridge.get_upstream_cookie():
        return PlainReply(NOT_AUTHENTICATED, status_code=401)

    try:
        result = await ctx.call("GET", f"/chat/messages/{chat_id}", requires_session=True)
    except UpstreamError as e:
        logger.error(f"Error retrieving chat history {chat_id}: {e}")
        return PlainReply(OPEN_HISTORY_ERROR, status_code=500)

    return Render("chat", {"chatId": chat_id, "messages": result.data or []})


async def delete_chat(ctx: RelayContext, chat_id: Optional[str]) -> RelayResult:
    """Delete one chat and return to the history page."""
    if not chat_id:
        return PlainReply(MISSING_CHAT_ID, status_code=400)

    if not ctx.bridge.get_upstream_cookie():
        return PlainReply(NOT_AUTHENTICATED, status_code=401)

    try:
        await ctx.call(
            "DELETE",
            f"/chat/chats/{quote(chat_id, safe='')}",
            requires_session=True,
        )
    except UpstreamError as e:
        logger.error(f"Error deleting chat {chat_id}: {e}")
        return PlainReply(DELETE_ERROR, status_code=500)

    return Redirect("/chat-history?deleted=true")
