"""CRUD-style helpers for managing users."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chat_palace.core import security
from chat_palace.models.user import User
from chat_palace.schemas.user import UserCreate, UserUpdate
from chat_palace.services.errors import (
    InvalidCredentialsError,
    UsernameTakenError,
    UserNotFoundError,
    UserUpdateError,
)

__all__ = [
    "get_user",
    "get_users",
    "get_user_by_username",
    "register_user",
    "authenticate",
    "update_user",
]

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> User:
    """Return a single user by primary key.

    Raises:
        UserNotFoundError: If no user has ``user_id``.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def get_users(db: Session) -> Sequence[User]:
    """Return every registered user."""
    return db.query(User).all()


def get_user_by_username(db: Session, username: str) -> User | None:
    """Return the user registered under ``username``, if any."""
    return db.query(User).filter(User.username == username).first()


def register_user(db: Session, payload: UserCreate) -> User:
    """Persist a new user with a bcrypt-hashed password.

    Raises:
        UsernameTakenError: If the username is already registered.
    """
    if get_user_by_username(db, payload.username) is not None:
        raise UsernameTakenError(payload.username)

    user = User(
        username=payload.username,
        profile_image=payload.profile_image,
        password_hash=security.hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        # Lost a race against a concurrent registration of the same name.
        db.rollback()
        raise UsernameTakenError(payload.username) from err
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    """Return the user matching the credentials.

    Raises:
        InvalidCredentialsError: If the username is unknown or the password is wrong.
    """
    user = get_user_by_username(db, username)
    if user is None or not security.verify_password(password, user.password_hash):
        raise InvalidCredentialsError("User does not exist with such username or password.")
    return user


def update_user(db: Session, user_id: str, update_data: UserUpdate) -> User:
    """Apply a partial edit to a user.

    Omitted fields are left untouched; the password is re-hashed only when a
    non-blank new one is supplied.

    Raises:
        UserUpdateError: If the user does not exist or nothing changed.
        UsernameTakenError: If the new username belongs to someone else.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserUpdateError(f"Failed to update user {user_id}: no such user")

    modified = False
    if update_data.username is not None and update_data.username != user.username:
        other = get_user_by_username(db, update_data.username)
        if other is not None and other.id != user.id:
            raise UsernameTakenError(update_data.username)
        user.username = update_data.username
        modified = True
    if update_data.profile_image is not None and update_data.profile_image != user.profile_image:
        user.profile_image = update_data.profile_image
        modified = True
    if update_data.password and update_data.password.strip():
        user.password_hash = security.hash_password(update_data.password)
        modified = True

    if not modified:
        raise UserUpdateError(f"Failed to update user {user_id}: nothing changed")

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise UsernameTakenError(user.username) from err
    db.refresh(user)
    return user
