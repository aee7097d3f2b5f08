"""Tests for conversation find-or-create, listing and deletion."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from chat_palace.models import Conversation, Message, User
from tests.conftest import identity


def test_requires_identity_header(client: TestClient) -> None:
    """Conversation endpoints refuse callers without the identity header."""
    response = client.get("/conversations")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Unauthorized: _id not provided"


def test_blank_identity_header_rejected(client: TestClient) -> None:
    response = client.get("/conversations", headers={"_id": "  "})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_start_conversation_is_find_or_create(
    client: TestClient, alice: User, bob: User, db_session: Session
) -> None:
    """Starting a conversation twice, from either side, yields one record."""
    first = client.post("/conversations", json={"user2": bob.id}, headers=identity(alice))
    assert first.status_code == status.HTTP_201_CREATED
    created = first.json()
    assert created["user1"] == alice.id
    assert created["user2"] == bob.id
    assert created["hasUnreadMessages"] is False

    again = client.post("/conversations", json={"user2": bob.id}, headers=identity(alice))
    assert again.status_code == status.HTTP_200_OK
    assert again.json()["_id"] == created["_id"]

    reverse = client.post("/conversations", json={"user2": alice.id}, headers=identity(bob))
    assert reverse.status_code == status.HTTP_200_OK
    assert reverse.json()["_id"] == created["_id"]

    assert db_session.query(Conversation).count() == 1


def test_start_conversation_with_self(client: TestClient, alice: User) -> None:
    response = client.post("/conversations", json={"user2": alice.id}, headers=identity(alice))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_start_conversation_with_unknown_user(client: TestClient, alice: User) -> None:
    response = client.post("/conversations", json={"user2": "nobody"}, headers=identity(alice))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_conversations_for_both_participants(
    client: TestClient, conversation: Conversation, alice: User, bob: User, carol: User
) -> None:
    """Each participant sees the conversation; outsiders do not."""
    for user in (alice, bob):
        response = client.get("/conversations", headers=identity(user))
        assert response.status_code == status.HTTP_200_OK
        assert [c["_id"] for c in response.json()] == [conversation.id]

    response = client.get("/conversations", headers=identity(carol))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_get_conversation(client: TestClient, conversation: Conversation, bob: User) -> None:
    response = client.get(f"/conversations/{conversation.id}", headers=identity(bob))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["_id"] == conversation.id


def test_get_conversation_hidden_from_outsider(
    client: TestClient, conversation: Conversation, carol: User
) -> None:
    response = client.get(f"/conversations/{conversation.id}", headers=identity(carol))
    assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteConversation:
    """DELETE /conversations/{id} removes the conversation and its messages."""

    def test_delete_reports_counts(
        self,
        client: TestClient,
        conversation: Conversation,
        message: Message,
        bob: User,
        db_session: Session,
    ) -> None:
        conversation_id = conversation.id
        response = client.delete(f"/conversations/{conversation_id}", headers=identity(bob))
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "message": "Conversation and associated messages deleted successfully",
            "deletedConversationCount": 1,
            "deletedMessagesCount": 1,
        }

        assert db_session.query(Conversation).filter(Conversation.id == conversation_id).count() == 0
        assert db_session.query(Message).filter(Message.conversation_id == conversation_id).count() == 0

        follow_up = client.get(f"/conversations/{conversation_id}/messages", headers=identity(bob))
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_by_outsider_is_forbidden(
        self,
        client: TestClient,
        conversation: Conversation,
        message: Message,
        carol: User,
        db_session: Session,
    ) -> None:
        response = client.delete(f"/conversations/{conversation.id}", headers=identity(carol))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert db_session.query(Conversation).filter(Conversation.id == conversation.id).count() == 1
        assert db_session.query(Message).filter(Message.conversation_id == conversation.id).count() == 1

    def test_delete_unknown_conversation(self, client: TestClient, alice: User) -> None:
        response = client.delete("/conversations/missing", headers=identity(alice))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Conversation not found or already deleted"

    def test_delete_leaves_other_conversations(
        self,
        client: TestClient,
        conversation: Conversation,
        alice: User,
        carol: User,
        db_session: Session,
    ) -> None:
        other = client.post("/conversations", json={"user2": carol.id}, headers=identity(alice))
        assert other.status_code == status.HTTP_201_CREATED

        response = client.delete(f"/conversations/{conversation.id}", headers=identity(alice))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["deletedMessagesCount"] == 0

        remaining = client.get("/conversations", headers=identity(alice)).json()
        assert [c["_id"] for c in remaining] == [other.json()["_id"]]
