"""Users container: directory cache plus registration, login and profile edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from chat_palace.schemas.user import UserResponse

from .api import ApiError, ChatPalaceClient
from .forms import EditUserForm, LoginForm, RegistrationForm, field_errors
from .session import SessionHolder
from .store import Append, ReplaceAll, Reset, Store, UpdateOne

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error. Please try again later."


@dataclass(frozen=True)
class Outcome:
    """Result of a user-facing operation: a banner message and/or field errors."""

    success: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.success is not None


class UsersContainer:
    """Cache of registered users and the operations that change who is logged in."""

    def __init__(self, client: ChatPalaceClient, sessions: SessionHolder) -> None:
        self.client = client
        self.sessions = sessions
        self.store: Store[UserResponse] = Store("users")

    @property
    def users(self) -> tuple[UserResponse, ...]:
        return self.store.records

    @property
    def logged_in_user(self) -> UserResponse | None:
        return self.sessions.current.user if self.sessions.current else None

    def fetch_users(self) -> None:
        """Reload the user directory; on failure the cache is left as it was."""
        try:
            users = self.client.list_users()
        except ApiError as err:
            logger.error("Failed to fetch users: %s", err)
            return
        self.store.dispatch(ReplaceAll(tuple(users)))

    def find_user(self, user_id: str) -> UserResponse | None:
        return self.store.find(user_id)

    def register(
        self,
        username: str,
        profile_image: str,
        password: str,
        password_repeat: str,
    ) -> Outcome:
        """Register and log in as the new user."""
        try:
            form = RegistrationForm(
                username=username,
                profile_image=profile_image,
                password=password,
                password_repeat=password_repeat,
            )
        except ValidationError as err:
            return Outcome(field_errors=field_errors(err))

        try:
            user = self.client.register(
                form.username, form.profile_image, form.password, form.password_repeat
            )
        except ApiError as err:
            if err.status_code in (409, 422):
                return Outcome(error=err.detail)
            logger.error("Registration failed: %s", err)
            return Outcome(error="Failed to register user." if err.status_code else SERVER_ERROR)

        self.store.dispatch(Append(user))
        self.sessions.start(user)
        self.fetch_users()
        return Outcome(success="Registration successful")

    def login(self, username: str, password: str) -> Outcome:
        try:
            form = LoginForm(username=username, password=password)
        except ValidationError as err:
            return Outcome(field_errors=field_errors(err))

        try:
            user = self.client.login(form.username, form.password)
        except ApiError as err:
            if err.status_code == 401:
                return Outcome(error=err.detail)
            logger.error("Login failed: %s", err)
            if err.status_code is None:
                return Outcome(
                    error="A server error occurred while trying to connect. Please try again later."
                )
            return Outcome(error="Unexpected server response.")

        self.sessions.start(user)
        return Outcome(success="Login success, you will be directed to your profile page.")

    def logout(self) -> None:
        self.sessions.clear()

    def edit_user(
        self,
        *,
        username: str | None = None,
        profile_image: str | None = None,
        password: str | None = None,
    ) -> Outcome:
        """Edit the logged-in user; omitted fields keep their current values."""
        current = self.sessions.current
        if current is None:
            return Outcome(error="You must be logged in to edit your profile.")

        try:
            form = EditUserForm(
                username=username if username is not None else current.user.username,
                profile_image=(
                    profile_image if profile_image is not None else current.user.profile_image
                ),
                password=password or "",
            )
        except ValidationError as err:
            return Outcome(field_errors=field_errors(err))

        try:
            message = self.client.edit_user(
                current.user_id,
                username=form.username,
                profile_image=form.profile_image,
                password=form.password or None,
            )
        except ApiError as err:
            logger.error("Failed to update user %s: %s", current.user_id, err)
            if err.status_code == 409:
                return Outcome(error=err.detail)
            return Outcome(error="Failed to update user." if err.status_code else SERVER_ERROR)

        changes = {"username": form.username, "profile_image": form.profile_image}
        self.sessions.start(current.user.model_copy(update=changes))
        self.store.dispatch(UpdateOne(current.user_id, changes))
        return Outcome(success=message)

    def reset(self) -> None:
        self.store.dispatch(Reset())
