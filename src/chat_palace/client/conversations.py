"""Conversations container: the caller's conversations and the active selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chat_palace.schemas.conversation import ConversationResponse
from chat_palace.schemas.user import UserResponse

from .api import ApiError, ChatPalaceClient
from .session import SessionHolder
from .store import Append, RemoveById, ReplaceAll, Reset, Store
from .users import UsersContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversationWithPartner:
    """A conversation paired with the other participant's record, when known."""

    conversation: ConversationResponse
    partner: UserResponse | None


class ConversationsContainer:
    """Cache of the logged-in user's conversations.

    The active conversation id is transient UI state kept beside the cache,
    not inside it.
    """

    def __init__(
        self,
        client: ChatPalaceClient,
        sessions: SessionHolder,
        users: UsersContainer | None = None,
    ) -> None:
        self.client = client
        self.sessions = sessions
        self.users = users
        self.store: Store[ConversationResponse] = Store("conversations")
        self.active_conversation_id: str | None = None

    @property
    def conversations(self) -> tuple[ConversationResponse, ...]:
        return self.store.records

    def set_active_conversation(self, conversation_id: str | None) -> None:
        self.active_conversation_id = conversation_id

    def _involves(self, conversation: ConversationResponse, user_id: str) -> bool:
        return user_id in (conversation.user1, conversation.user2)

    def fetch_conversations(self) -> None:
        """Reload the caller's conversations; a failure leaves the cache unchanged."""
        session = self.sessions.current
        if session is None:
            return
        try:
            conversations = self.client.list_conversations(session)
        except ApiError as err:
            logger.error("Failed to fetch conversations: %s", err)
            return
        self.store.dispatch(
            ReplaceAll(tuple(c for c in conversations if self._involves(c, session.user_id)))
        )

    def conversation_count(self) -> int:
        session = self.sessions.current
        if session is None:
            return 0
        return sum(1 for c in self.store if self._involves(c, session.user_id))

    def start_or_get_conversation(self, other_user_id: str) -> str | None:
        """Return the id of the conversation with ``other_user_id``, creating it if needed.

        The cache is checked first; otherwise the server finds or creates it.
        The conversation becomes the active one. Returns None on failure.
        """
        session = self.sessions.current
        if session is None:
            logger.error("Cannot start a conversation without a logged-in user")
            return None

        for conversation in self.store:
            if {conversation.user1, conversation.user2} == {session.user_id, other_user_id}:
                self.active_conversation_id = conversation.id
                return conversation.id

        try:
            conversation = self.client.start_conversation(session, other_user_id)
        except ApiError as err:
            logger.error("Failed to start or get conversation: %s", err)
            return None

        if self.store.find(conversation.id) is None:
            self.store.dispatch(Append(conversation))
        self.active_conversation_id = conversation.id
        return conversation.id

    def add_message(self, conversation_id: str, content: str) -> bool:
        """Post a message and refresh the conversation list (unread flags)."""
        session = self.sessions.current
        if session is None:
            logger.error("Cannot post a message without a logged-in user")
            return False
        try:
            self.client.post_message(session, conversation_id, content)
        except ApiError as err:
            logger.error("Failed to add message: %s", err)
            return False
        self.fetch_conversations()
        return True

    def delete_conversation(self, conversation_id: str) -> bool:
        session = self.sessions.current
        if session is None:
            return False
        try:
            self.client.delete_conversation(session, conversation_id)
        except ApiError as err:
            logger.error("Error deleting conversation %s: %s", conversation_id, err)
            return False
        self.store.dispatch(RemoveById(conversation_id))
        if self.active_conversation_id == conversation_id:
            self.active_conversation_id = None
        return True

    def with_partners(self) -> list[ConversationWithPartner]:
        """Pair each cached conversation with the other participant's user record."""
        session = self.sessions.current
        if session is None:
            return []
        user_id = session.user_id
        result = []
        for conversation in self.store:
            if not self._involves(conversation, user_id):
                continue
            partner_id = conversation.user2 if conversation.user1 == user_id else conversation.user1
            partner = self.users.find_user(partner_id) if self.users else None
            result.append(ConversationWithPartner(conversation, partner))
        return result

    def reset(self) -> None:
        self.store.dispatch(Reset())
        self.active_conversation_id = None
