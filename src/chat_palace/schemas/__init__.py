# src/chat_palace/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
Field names on the wire are camelCase with ``_id`` as the identifier key.
"""

from .conversation import ConversationCreate, ConversationDeleteResponse, ConversationResponse
from .message import MessageCreate, MessageResponse, MessageWithSender, SenderInfo
from .user import LoginRequest, UserCreate, UserResponse, UserUpdate

__all__ = [
    "ConversationCreate", "ConversationDeleteResponse", "ConversationResponse",
    "MessageCreate", "MessageResponse", "MessageWithSender", "SenderInfo",
    "LoginRequest", "UserCreate", "UserResponse", "UserUpdate",
]
