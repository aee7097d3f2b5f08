# src/chat_palace/client/__init__.py
"""Client-side data containers synchronized with the Chat Palace API.

Each container caches one kind of record, changes it only through the actions
in :mod:`chat_palace.client.store`, and re-fetches on demand. The last fetch
wins; nothing is pushed from the server.
"""

from .api import ApiError, ChatPalaceClient
from .app import ChatApp
from .conversations import ConversationsContainer
from .messages import MessagesContainer
from .session import Session, SessionHolder
from .users import Outcome, UsersContainer

__all__ = [
    "ApiError",
    "ChatApp",
    "ChatPalaceClient",
    "ConversationsContainer",
    "MessagesContainer",
    "Outcome",
    "Session",
    "SessionHolder",
    "UsersContainer",
]
