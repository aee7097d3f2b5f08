"""Messages container: the messages of one conversation at a time."""

from __future__ import annotations

import logging

from chat_palace.schemas.message import MessageResponse

from .api import ApiError, ChatPalaceClient
from .session import SessionHolder
from .store import Append, ReplaceAll, Reset, Store

logger = logging.getLogger(__name__)


class MessagesContainer:
    """Cache of the most recently loaded conversation's messages.

    Loaded messages carry ``sender_info``; messages appended after a post do
    not until the next load.
    """

    def __init__(self, client: ChatPalaceClient, sessions: SessionHolder) -> None:
        self.client = client
        self.sessions = sessions
        self.store: Store[MessageResponse] = Store("messages")

    @property
    def messages(self) -> tuple[MessageResponse, ...]:
        return self.store.records

    def load_messages(self, conversation_id: str) -> None:
        """Replace the cache with the conversation's messages, oldest first."""
        session = self.sessions.current
        if session is None:
            logger.error("Cannot load messages without a logged-in user")
            return
        try:
            messages = self.client.list_messages(session, conversation_id)
        except ApiError as err:
            logger.error("Failed to fetch messages: %s", err)
            return
        self.store.dispatch(ReplaceAll(tuple(messages)))

    def post_message(self, conversation_id: str, content: str) -> MessageResponse | None:
        session = self.sessions.current
        if session is None:
            logger.error("User not authenticated; message not posted")
            return None
        try:
            message = self.client.post_message(session, conversation_id, content)
        except ApiError as err:
            logger.error("Error posting message: %s", err)
            return None
        self.store.dispatch(Append(message))
        return message

    def reset(self) -> None:
        self.store.dispatch(Reset())
