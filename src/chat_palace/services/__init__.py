# src/chat_palace/services/__init__.py
"""Business logic services for the Chat Palace application."""

from . import conversation_service, message_service, user_service
from .errors import (
    ChatPalaceError,
    ConversationNotFoundError,
    InvalidCredentialsError,
    NotParticipantError,
    SelfConversationError,
    UsernameTakenError,
    UserNotFoundError,
    UserUpdateError,
)

__all__ = [
    "conversation_service",
    "message_service",
    "user_service",
    "ChatPalaceError",
    "ConversationNotFoundError",
    "InvalidCredentialsError",
    "NotParticipantError",
    "SelfConversationError",
    "UsernameTakenError",
    "UserNotFoundError",
    "UserUpdateError",
]
