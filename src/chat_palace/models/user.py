# src/chat_palace/models/user.py
"""SQLAlchemy model for registered users."""

from __future__ import annotations

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chat_palace.db.session import Base


def new_id() -> str:
    """Return a fresh random identifier shared by users, conversations and messages."""
    return str(uuid.uuid4())


class User(Base):
    """A registered account identified by a UUID-v4 string."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    profile_image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # bcrypt digest; never serialized to clients.
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
