# src/chat_palace/api/v1/endpoints/messages.py
"""Message endpoints for the Chat Palace API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from chat_palace.models import Message
from chat_palace.schemas.message import MessageCreate, MessageResponse, MessageWithSender
from chat_palace.services import message_service
from chat_palace.services.errors import ConversationNotFoundError, NotParticipantError

from ..dependencies import CallerIdDep, SessionDep

router = APIRouter(prefix="/conversations/{conversation_id}/messages", tags=["messages"])


def _access_error(err: ConversationNotFoundError | NotParticipantError) -> HTTPException:
    if isinstance(err, ConversationNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found",
        )
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Forbidden: You are not a participant in this conversation",
    )


@router.get("", response_model=list[MessageWithSender])
async def list_messages(
    conversation_id: str,
    caller_id: CallerIdDep,
    db: SessionDep,
) -> list[MessageWithSender]:
    """List a conversation's messages oldest first, joined with sender profiles.

    Reading as the conversation's second participant clears its unread flag.
    """
    try:
        messages = message_service.list_messages(db, conversation_id, caller_id)
    except (ConversationNotFoundError, NotParticipantError) as err:
        raise _access_error(err) from err
    return [MessageWithSender.from_message(message) for message in messages]


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    conversation_id: str,
    payload: MessageCreate,
    caller_id: CallerIdDep,
    db: SessionDep,
) -> Message:
    """Post a message as the caller."""
    try:
        return message_service.post_message(db, conversation_id, caller_id, payload.content)
    except (ConversationNotFoundError, NotParticipantError) as err:
        raise _access_error(err) from err
