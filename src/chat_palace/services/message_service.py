"""Posting and reading messages, including unread-flag bookkeeping.

The unread flag models only one direction. Posting sets it whenever the sender
is not user2 of the conversation; reading clears it only when the reader is
user2. user1 is treated as always caught up.
"""
from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from chat_palace.models import Conversation, Message, User
from chat_palace.services.conversation_service import get_for_participant

__all__ = ["list_messages", "post_message"]


def list_messages(db: Session, conversation_id: str, caller_id: str) -> Sequence[Message]:
    """Return the conversation's messages oldest first, each with its sender loaded.

    Clears the unread flag when the caller is the conversation's user2.
    """
    conversation = get_for_participant(db, conversation_id, caller_id)

    if conversation.user2 == caller_id and conversation.has_unread_messages:
        conversation.has_unread_messages = False
        db.commit()

    return (
        db.query(Message)
        .join(User, Message.sender_id == User.id)
        .filter(Message.conversation_id == conversation.id)
        .order_by(Message.timestamp.asc(), Message.seq.asc())
        .all()
    )


def post_message(db: Session, conversation_id: str, sender_id: str, content: str) -> Message:
    """Store a new message and flag the conversation unread for the other side."""
    conversation: Conversation = get_for_participant(db, conversation_id, sender_id)

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=content,
        likes=[],
    )
    db.add(message)
    if conversation.user2 != sender_id:
        conversation.has_unread_messages = True
    db.commit()
    db.refresh(message)
    return message
