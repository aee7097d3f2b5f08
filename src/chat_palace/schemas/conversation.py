"""Conversation-related Pydantic schemas."""

from pydantic import Field

from .base import ApiModel


class ConversationCreate(ApiModel):
    """Schema for starting (or resuming) a conversation with another user."""

    user2: str = Field(..., min_length=1, description="Identifier of the other participant")


class ConversationResponse(ApiModel):
    """Conversation information returned by the API."""

    id: str = Field(..., alias="_id")
    user1: str
    user2: str
    has_unread_messages: bool


class ConversationDeleteResponse(ApiModel):
    """Counts of rows removed by a conversation delete."""

    message: str
    deleted_conversation_count: int
    deleted_messages_count: int
