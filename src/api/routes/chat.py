"""
Chat REST endpoint.

Delegates to ``ChatRelay`` — no business logic here.
"""

from fastapi import APIRouter, Body, Depends

from src.core.models import ChatRequest, ChatResponse
from src.services.relay import ChatRelay

router = APIRouter(tags=["chat"])


def get_chat_relay() -> ChatRelay:
    return ChatRelay()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest | None = Body(None),
    relay: ChatRelay = Depends(get_chat_relay),
):
    """Answer a question about the supplied transcript context."""
    return await relay.chat(body or ChatRequest())
