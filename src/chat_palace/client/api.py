"""HTTP client for the Chat Palace API.

One method per endpoint. Every call is a single request: no retries, no
de-duplication, and no cancellation beyond the configured timeout.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from chat_palace.core.settings import settings
from chat_palace.schemas.conversation import ConversationDeleteResponse, ConversationResponse
from chat_palace.schemas.message import MessageResponse, MessageWithSender
from chat_palace.schemas.user import UserResponse

from .session import Session

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Raised for a failed request.

    ``status_code`` is None when no response was received at all.
    """

    def __init__(self, status_code: int | None, detail: str) -> None:
        super().__init__(f"{status_code or 'network error'}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail", body.get("error"))
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class ChatPalaceClient:
    """Synchronous wrapper around the REST surface.

    Args:
        base_url: API root; defaults to ``API_BASE_URL``.
        http: An existing ``httpx.Client`` to send requests with (for example
            FastAPI's ``TestClient``). It is not closed by :meth:`close`.
        timeout: Request timeout in seconds; defaults to ``CLIENT_TIMEOUT_SECONDS``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.client_timeout_seconds,
        )

    def close(self) -> None:
        """Close the underlying connection pool if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ChatPalaceClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        session: Session | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = session.identity_headers() if session is not None else None
        try:
            response = self._http.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as err:
            raise ApiError(None, str(err)) from err
        if response.is_error:
            raise ApiError(response.status_code, _error_detail(response))
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response.json()

    # Users

    def list_users(self) -> list[UserResponse]:
        return [UserResponse.model_validate(item) for item in self._request("GET", "/users")]

    def register(
        self,
        username: str,
        profile_image: str,
        password: str,
        password_repeat: str | None = None,
    ) -> UserResponse:
        body: dict[str, Any] = {
            "username": username,
            "profileImage": profile_image,
            "password": password,
        }
        if password_repeat is not None:
            body["passwordRepeat"] = password_repeat
        return UserResponse.model_validate(self._request("POST", "/users", json=body))

    def login(self, username: str, password: str) -> UserResponse:
        body = {"username": username, "password": password}
        return UserResponse.model_validate(self._request("POST", "/users/login", json=body))

    def edit_user(
        self,
        user_id: str,
        *,
        username: str | None = None,
        profile_image: str | None = None,
        password: str | None = None,
    ) -> str:
        """Edit a user and return the server's success message."""
        body: dict[str, Any] = {}
        if username is not None:
            body["username"] = username
        if profile_image is not None:
            body["profileImage"] = profile_image
        if password:
            body["password"] = password
        return self._request("PATCH", f"/edit-user/{user_id}", json=body)["success"]

    def get_user(self, user_id: str) -> UserResponse:
        return UserResponse.model_validate(self._request("GET", f"/users/{user_id}"))

    # Conversations

    def list_conversations(self, session: Session) -> list[ConversationResponse]:
        data = self._request("GET", "/conversations", session=session)
        return [ConversationResponse.model_validate(item) for item in data]

    def start_conversation(self, session: Session, other_user_id: str) -> ConversationResponse:
        data = self._request(
            "POST", "/conversations", session=session, json={"user2": other_user_id}
        )
        return ConversationResponse.model_validate(data)

    def get_conversation(self, session: Session, conversation_id: str) -> ConversationResponse:
        data = self._request("GET", f"/conversations/{conversation_id}", session=session)
        return ConversationResponse.model_validate(data)

    def delete_conversation(
        self, session: Session, conversation_id: str
    ) -> ConversationDeleteResponse:
        data = self._request("DELETE", f"/conversations/{conversation_id}", session=session)
        return ConversationDeleteResponse.model_validate(data)

    # Messages

    def list_messages(self, session: Session, conversation_id: str) -> list[MessageWithSender]:
        data = self._request(
            "GET", f"/conversations/{conversation_id}/messages", session=session
        )
        return [MessageWithSender.model_validate(item) for item in data]

    def post_message(self, session: Session, conversation_id: str, content: str) -> MessageResponse:
        data = self._request(
            "POST",
            f"/conversations/{conversation_id}/messages",
            session=session,
            json={"content": content},
        )
        return MessageResponse.model_validate(data)
