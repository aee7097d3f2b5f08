"""Conversation endpoints for the Chat Palace API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from chat_palace.models import Conversation
from chat_palace.schemas.conversation import (
    ConversationCreate,
    ConversationDeleteResponse,
    ConversationResponse,
)
from chat_palace.services import conversation_service
from chat_palace.services.errors import (
    ConversationNotFoundError,
    NotParticipantError,
    SelfConversationError,
    UserNotFoundError,
)

from ..dependencies import CallerIdDep, SessionDep

router = APIRouter(prefix="/conversations", tags=["conversations"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(caller_id: CallerIdDep, db: SessionDep) -> list[Conversation]:
    """List every conversation the caller takes part in."""
    return list(conversation_service.list_for_user(db, caller_id))


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def start_conversation(
    payload: ConversationCreate,
    caller_id: CallerIdDep,
    db: SessionDep,
    response: Response,
) -> Conversation:
    """Return the caller's conversation with ``user2``, creating it if needed.

    Responds 201 when a conversation was created and 200 when one already
    existed for the pair (in either order).
    """
    try:
        conversation, created = conversation_service.find_or_create(db, caller_id, payload.user2)
    except SelfConversationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except UserNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        ) from err

    if not created:
        response.status_code = status.HTTP_200_OK
    return conversation


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    caller_id: CallerIdDep,
    db: SessionDep,
) -> Conversation:
    """Get a conversation the caller participates in."""
    try:
        return conversation_service.get_for_participant(db, conversation_id, caller_id)
    except (ConversationNotFoundError, NotParticipantError) as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found or unauthorized access",
        ) from err


@router.delete("/{conversation_id}", response_model=ConversationDeleteResponse)
async def delete_conversation(
    conversation_id: str,
    caller_id: CallerIdDep,
    db: SessionDep,
) -> ConversationDeleteResponse:
    """Delete a conversation and all of its messages."""
    try:
        result = conversation_service.delete_conversation(db, conversation_id, caller_id)
    except ConversationNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found or already deleted",
        ) from err
    except NotParticipantError as err:
        logger.warning("Refused delete of %s by non-participant %s", conversation_id, caller_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: You are not a participant in this conversation",
        ) from err

    return ConversationDeleteResponse(
        message="Conversation and associated messages deleted successfully",
        deleted_conversation_count=result.conversations,
        deleted_messages_count=result.messages,
    )
