"""Message-related Pydantic schemas."""
from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from .base import ApiModel

if TYPE_CHECKING:
    from chat_palace.models import Message


class MessageCreate(ApiModel):
    """Schema for posting a message. Empty and long content are accepted."""

    content: str


class SenderInfo(ApiModel):
    """Public identity of a message sender."""

    id: str = Field(..., alias="_id")
    username: str
    profile_image: str


class MessageResponse(ApiModel):
    """Message information returned by the API."""

    id: str = Field(..., alias="_id")
    conversation_id: str
    sender_id: str
    content: str
    timestamp: str
    likes: list[str] = Field(default_factory=list)


class MessageWithSender(MessageResponse):
    """Message joined with its sender's public profile."""

    sender_info: SenderInfo

    @classmethod
    def from_message(cls, message: Message) -> MessageWithSender:
        """Build the joined payload from an ORM message with a loaded sender."""
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            timestamp=message.timestamp,
            likes=list(message.likes or []),
            sender_info=SenderInfo.model_validate(message.sender),
        )
