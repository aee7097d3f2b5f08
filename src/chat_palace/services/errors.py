"""Exceptions raised by the service layer.

Endpoints translate these into HTTP responses; nothing here knows about HTTP.
"""

from __future__ import annotations


class ChatPalaceError(RuntimeError):
    """Base exception for domain failures."""


class UsernameTakenError(ChatPalaceError):
    """Raised when a username is already registered."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already exists: {username}")
        self.username = username


class InvalidCredentialsError(ChatPalaceError):
    """Raised when a username/password pair does not match a user."""


class UserNotFoundError(ChatPalaceError):
    """Raised when a user id does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class UserUpdateError(ChatPalaceError):
    """Raised when an edit modifies no user record."""


class ConversationNotFoundError(ChatPalaceError):
    """Raised when a conversation id does not exist."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class NotParticipantError(ChatPalaceError):
    """Raised when the caller is neither user1 nor user2 of a conversation."""

    def __init__(self, conversation_id: str, user_id: str) -> None:
        super().__init__(f"User {user_id} is not a participant in {conversation_id}")
        self.conversation_id = conversation_id
        self.user_id = user_id


class SelfConversationError(ChatPalaceError):
    """Raised when a user tries to start a conversation with themselves."""
