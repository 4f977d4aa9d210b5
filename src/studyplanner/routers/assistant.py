"""REST API endpoint for the conversational schedule assistant."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.assistant import MessageRequest, MessageResponse
from ..services.assistant_service import AssistantService
from .dependencies import get_assistant_service, get_current_user

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


@router.post("/messages", response_model=MessageResponse)
async def post_message(
    payload: MessageRequest,
    user_id: str = Depends(get_current_user),
    service: AssistantService = Depends(get_assistant_service),
) -> MessageResponse:
    """Answer a free-text schedule question or command."""
    reply = await service.handle_user_message(payload.text, user_id)
    return MessageResponse(reply=reply)


__all__ = ["router"]
