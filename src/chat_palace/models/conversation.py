# src/chat_palace/models/conversation.py
"""Model describing a two-party conversation."""

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from chat_palace.db.session import Base
from chat_palace.models.user import new_id


class Conversation(Base):
    """Conversation between exactly two users.

    The pair is stored as two fixed columns but compared as an unordered pair.
    There is deliberately no unique constraint on (user1, user2): two
    concurrent find-or-create calls for the same pair may both insert.
    """

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user1: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    user2: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    has_unread_messages: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def has_participant(self, user_id: str) -> bool:
        """Return True if ``user_id`` is user1 or user2."""
        return user_id in (self.user1, self.user2)
