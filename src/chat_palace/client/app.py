"""Wires one API client, one session and the three containers together."""

from __future__ import annotations

from pathlib import Path

import httpx

from .api import ChatPalaceClient
from .conversations import ConversationsContainer
from .messages import MessagesContainer
from .session import Session, SessionHolder
from .users import UsersContainer


class ChatApp:
    """Provider for the client containers.

    Every container receives the same client and session holder, so logging
    in through ``users`` is immediately visible to ``conversations`` and
    ``messages``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.Client | None = None,
        session: Session | None = None,
    ) -> None:
        self.client = ChatPalaceClient(base_url, http=http)
        self.sessions = SessionHolder(session)
        self.users = UsersContainer(self.client, self.sessions)
        self.conversations = ConversationsContainer(self.client, self.sessions, self.users)
        self.messages = MessagesContainer(self.client, self.sessions)

    @classmethod
    def restore(cls, session_file: str | Path, **kwargs) -> ChatApp:
        """Build an app logged in as the user saved in ``session_file``, if any."""
        return cls(session=Session.load(session_file), **kwargs)

    def refresh(self) -> None:
        """Fetch users and, when logged in, the user's conversations."""
        self.users.fetch_users()
        self.conversations.fetch_conversations()

    def save_session(self, session_file: str | Path) -> None:
        if self.sessions.current is not None:
            self.sessions.current.save(session_file)

    def logout(self, session_file: str | Path | None = None) -> None:
        """Forget the session and empty every container."""
        self.users.logout()
        self.users.reset()
        self.conversations.reset()
        self.messages.reset()
        if session_file is not None:
            Path(session_file).unlink(missing_ok=True)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> ChatApp:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
