# src/chat_palace/models/__init__.py
"""SQLAlchemy models for the Chat Palace application."""

from .conversation import Conversation
from .message import Message
from .user import User

__all__ = [
    "Conversation",
    "Message",
    "User",
]
