"""Chat routes: the chat page, the JSON send endpoint and chat history."""

from typing import Optional, Union
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from chatfront.models.results import Render
from chatfront.relay import chat as relay_chat
from chatfront.relay.context import RelayContext
from chatfront.routes.responses import get_relay_context, to_response

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    """Request body for the chat endpoint.

    Attributes:
        message: User message to send to the assistant
        chat_id: Existing conversation id (``chatId``), omitted for a new chat
    """
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = Field(default=None, description="User message")
    chat_id: Optional[Union[int, str]] = Field(default=None, alias="chatId")


@router.get("/chat", response_class=HTMLResponse)
async def chat_page(request: Request):
    """Chat page - requires authentication (handled by middleware)."""
    return to_response(request, Render("chat"))


@router.post("/chat")
async def send_chat_message(
    request: Request,
    body: ChatRequest,
    ctx: RelayContext = Depends(get_relay_context),
):
    """Relay a chat message to the upstream.

    Returns:
        JSON ``{chatId, message}`` on success, ``{error}`` with 401 or 500 otherwise
    """
    result = await relay_chat.send_message(ctx, body.message, body.chat_id)
    return to_response(request, result)


@router.get("/chat-history", response_class=HTMLResponse)
async def chat_history_page(
    request: Request,
    deleted: Optional[str] = None,
    ctx: RelayContext = Depends(get_relay_context),
):
    """List previous chats."""
    result = await relay_chat.read_history(ctx, deleted=deleted == "true")
    return to_response(request, result)


@router.get("/open-chat-history")
async def open_chat_history(
    request: Request,
    chat_id: Optional[str] = Query(None, alias="chatId"),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Reopen a previous chat in the chat view."""
    result = await relay_chat.open_history(ctx, chat_id)
    return to_response(request, result)


@router.get("/delete-chat-history")
async def delete_chat_history(
    request: Request,
    chat_id: Optional[str] = Query(None, alias="chatId"),
    ctx: RelayContext = Depends(get_relay_context),
):
    """Delete a previous chat and return to the history list."""
    result = await relay_chat.delete_chat(ctx, chat_id)
    return to_response(request, result)
