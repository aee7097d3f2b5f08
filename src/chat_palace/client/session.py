"""Explicit logged-in-user session passed to every container.

The session is an ordinary object handed around by :class:`~chat_palace.client.app.ChatApp`
rather than ambient global state. It may be written to a JSON file to survive
restarts; passwords are never part of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from chat_palace.core.settings import settings
from chat_palace.schemas.user import UserResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """The user a client acts as."""

    user: UserResponse

    @property
    def user_id(self) -> str:
        return self.user.id

    def identity_headers(self) -> dict[str, str]:
        """Headers asserting this user's identity to the API."""
        return {settings.identity_header: self.user.id}

    def save(self, path: str | Path) -> None:
        """Write the session to ``path`` as JSON."""
        Path(path).write_text(self.user.model_dump_json(by_alias=True), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> Session | None:
        """Read a session saved by :meth:`save`; None if absent or unreadable."""
        path = Path(path)
        if not path.exists():
            return None
        try:
            return cls(UserResponse.model_validate_json(path.read_text(encoding="utf-8")))
        except (OSError, ValidationError) as err:
            logger.error("Ignoring unreadable session file %s: %s", path, err)
            return None


class SessionHolder:
    """Mutable slot for the current session, shared by the containers of one app."""

    def __init__(self, session: Session | None = None) -> None:
        self.current = session

    @property
    def user_id(self) -> str | None:
        return self.current.user_id if self.current else None

    def start(self, user: UserResponse) -> Session:
        self.current = Session(user)
        return self.current

    def clear(self) -> None:
        self.current = None
