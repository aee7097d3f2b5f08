"""Conversation lifecycle: find-or-create, listing and cascading delete."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from chat_palace.models import Conversation, Message, User
from chat_palace.services.errors import (
    ConversationNotFoundError,
    NotParticipantError,
    SelfConversationError,
    UserNotFoundError,
)

__all__ = [
    "DeletionResult",
    "find_between",
    "find_or_create",
    "list_for_user",
    "get_for_participant",
    "delete_conversation",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionResult:
    """Rows removed by a conversation delete."""

    conversations: int
    messages: int


def _participant_filter(user_id: str):
    return or_(Conversation.user1 == user_id, Conversation.user2 == user_id)


def find_between(db: Session, user_a: str, user_b: str) -> Conversation | None:
    """Return the conversation between two users, in either column order."""
    return (
        db.query(Conversation)
        .filter(
            or_(
                and_(Conversation.user1 == user_a, Conversation.user2 == user_b),
                and_(Conversation.user1 == user_b, Conversation.user2 == user_a),
            )
        )
        .first()
    )


def find_or_create(db: Session, caller_id: str, other_user_id: str) -> tuple[Conversation, bool]:
    """Return the caller's conversation with another user, creating it if needed.

    The lookup and the insert are not atomic and no constraint guards the
    pair, so two concurrent calls for the same pair can create duplicates.

    Returns:
        ``(conversation, created)``.

    Raises:
        SelfConversationError: If both ids are the same.
        UserNotFoundError: If either user does not exist.
    """
    if caller_id == other_user_id:
        raise SelfConversationError("Cannot start a conversation with yourself")
    for user_id in (caller_id, other_user_id):
        if db.get(User, user_id) is None:
            raise UserNotFoundError(user_id)

    existing = find_between(db, caller_id, other_user_id)
    if existing is not None:
        return existing, False

    conversation = Conversation(user1=caller_id, user2=other_user_id, has_unread_messages=False)
    db.add(conversation)
    db.commit()
    db.refresh(conversation)
    logger.info(
        "Created conversation %s between %s and %s", conversation.id, caller_id, other_user_id
    )
    return conversation, True


def list_for_user(db: Session, user_id: str) -> Sequence[Conversation]:
    """Return every conversation where the user is user1 or user2."""
    return db.query(Conversation).filter(_participant_filter(user_id)).all()


def get_for_participant(db: Session, conversation_id: str, user_id: str) -> Conversation:
    """Return a conversation the user takes part in.

    Raises:
        ConversationNotFoundError: If the conversation does not exist.
        NotParticipantError: If the user is not one of its participants.
    """
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    if not conversation.has_participant(user_id):
        raise NotParticipantError(conversation_id, user_id)
    return conversation


def delete_conversation(db: Session, conversation_id: str, user_id: str) -> DeletionResult:
    """Delete a conversation and every message in it.

    Raises:
        ConversationNotFoundError: If the conversation does not exist.
        NotParticipantError: If the caller is not a participant; nothing is deleted.
    """
    conversation = get_for_participant(db, conversation_id, user_id)

    deleted_messages = (
        db.query(Message)
        .filter(Message.conversation_id == conversation.id)
        .delete()
    )
    deleted_conversations = (
        db.query(Conversation)
        .filter(Conversation.id == conversation.id)
        .delete()
    )
    db.commit()
    logger.info(
        "Deleted conversation %s (%d conversation rows, %d messages) for %s",
        conversation_id,
        deleted_conversations,
        deleted_messages,
        user_id,
    )
    return DeletionResult(conversations=deleted_conversations, messages=deleted_messages)
