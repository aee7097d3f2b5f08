# src/chat_palace/models/message.py
"""Models describing messages posted to conversations."""

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chat_palace.db.session import Base
from chat_palace.db.time import utc_timestamp
from chat_palace.models.user import User, new_id


class Message(Base):
    """Plain-text message sent by one participant of a conversation."""

    __tablename__ = "messages"

    # Surrogate key recording insertion order; breaks timestamp ties.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)

    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("conversations.id"), nullable=False, index=True
    )
    sender_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_timestamp)
    # User ids; kept in the schema, no endpoint writes to it yet.
    likes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    sender: Mapped[User] = relationship("User", lazy="joined")
