"""Tests for registration, login and the user directory."""

import asyncio

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from chat_palace.core import security
from chat_palace.models import User
from tests.conftest import TEST_PASSWORD


def _register(client: TestClient, username: str, password: str = TEST_PASSWORD, **extra):
    payload = {"username": username, "profileImage": "https://example.com/me.png", "password": password}
    payload.update(extra)
    return client.post("/users", json=payload)


def test_register_user(client: TestClient, db_session: Session) -> None:
    """Registering returns the new user without any password material."""
    response = _register(client, "newuser1")
    assert response.status_code == status.HTTP_201_CREATED

    body = response.json()
    assert body["username"] == "newuser1"
    assert body["profileImage"] == "https://example.com/me.png"
    assert body["_id"]
    assert "password" not in body
    assert "passwordHash" not in body

    stored = db_session.get(User, body["_id"])
    assert stored is not None
    assert stored.password_hash != TEST_PASSWORD
    assert security.verify_password(TEST_PASSWORD, stored.password_hash)


def test_register_duplicate_username(client: TestClient, alice: User, db_session: Session) -> None:
    """A taken username is rejected and no second user is stored."""
    response = _register(client, alice.username)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username already exists"
    assert db_session.query(User).filter(User.username == alice.username).count() == 1


def test_register_password_repeat_mismatch(client: TestClient) -> None:
    """A confirmation that differs from the password fails validation."""
    response = _register(client, "newuser2", passwordRepeat="Different1!")
    assert response.status_code == 422


def test_register_password_repeat_match(client: TestClient) -> None:
    response = _register(client, "newuser3", passwordRepeat=TEST_PASSWORD)
    assert response.status_code == status.HTTP_201_CREATED


def test_register_requires_password(client: TestClient) -> None:
    response = client.post("/users", json={"username": "nopassword"})
    assert response.status_code == 422


def test_login_success(client: TestClient, alice: User) -> None:
    """Correct credentials return the matching user."""
    response = client.post(
        "/users/login", json={"username": alice.username, "password": TEST_PASSWORD}
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["_id"] == alice.id
    assert body["username"] == alice.username
    assert "password" not in body


def test_login_wrong_password(client: TestClient, alice: User) -> None:
    response = client.post(
        "/users/login", json={"username": alice.username, "password": "wrong"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "User does not exist with such username or password."


def test_login_unknown_user(client: TestClient) -> None:
    response = client.post("/users/login", json={"username": "ghost", "password": TEST_PASSWORD})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_users(client: TestClient, alice: User, bob: User) -> None:
    """The directory lists every user with public fields only."""
    response = client.get("/users")
    assert response.status_code == status.HTTP_200_OK
    users = response.json()
    assert {u["_id"] for u in users} == {alice.id, bob.id}
    for user in users:
        assert set(user) == {"_id", "username", "profileImage"}


def test_get_user(client: TestClient, alice: User) -> None:
    response = client.get(f"/users/{alice.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == alice.username


def test_get_user_not_found(client: TestClient) -> None:
    response = client.get("/users/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"


class TestEditUser:
    """Partial profile edits through PATCH /edit-user/{id}."""

    def test_edit_username_and_image(self, client: TestClient, alice: User, db_session: Session) -> None:
        response = client.patch(
            f"/edit-user/{alice.id}",
            json={"username": "alice-renamed", "profileImage": "https://example.com/new.png"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": "User updated successfully."}

        user = db_session.get(User, alice.id)
        assert user.username == "alice-renamed"
        assert user.profile_image == "https://example.com/new.png"

    def test_edit_keeps_omitted_fields(self, client: TestClient, alice: User, db_session: Session) -> None:
        original_image = alice.profile_image
        original_hash = alice.password_hash

        response = client.patch(f"/edit-user/{alice.id}", json={"username": "alice-only"})
        assert response.status_code == status.HTTP_200_OK

        user = db_session.get(User, alice.id)
        assert user.profile_image == original_image
        assert user.password_hash == original_hash

    def test_edit_password_rehashes(self, client: TestClient, alice: User) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"password": "N3wPassw0rd!"})
        assert response.status_code == status.HTTP_200_OK

        old = client.post("/users/login", json={"username": alice.username, "password": TEST_PASSWORD})
        assert old.status_code == status.HTTP_401_UNAUTHORIZED
        new = client.post("/users/login", json={"username": alice.username, "password": "N3wPassw0rd!"})
        assert new.status_code == status.HTTP_200_OK

    def test_blank_password_keeps_current(self, client: TestClient, alice: User, db_session: Session) -> None:
        original_hash = alice.password_hash
        response = client.patch(
            f"/edit-user/{alice.id}", json={"username": "alice-blank", "password": "   "}
        )
        assert response.status_code == status.HTTP_200_OK
        assert db_session.get(User, alice.id).password_hash == original_hash

    def test_edit_without_changes_fails(self, client: TestClient, alice: User) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"username": alice.username})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Failed to update user."

    def test_edit_missing_user_fails(self, client: TestClient) -> None:
        response = client.patch("/edit-user/missing", json={"username": "whoever"})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Failed to update user."

    def test_edit_to_taken_username(self, client: TestClient, alice: User, bob: User) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"username": bob.username})
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Username already exists"

    def test_blank_username_rejected(self, client: TestClient, alice: User, db_session: Session) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"username": "   "})
        assert response.status_code == 422
        assert db_session.get(User, alice.id).username == "alice12345"

    def test_padded_taken_username_conflicts(self, client: TestClient, alice: User, bob: User) -> None:
        """Surrounding whitespace does not dodge the uniqueness check."""
        response = client.patch(f"/edit-user/{alice.id}", json={"username": f"{bob.username} "})
        assert response.status_code == status.HTTP_409_CONFLICT

        names = [u["username"] for u in client.get("/users").json()]
        assert sorted(names) == sorted([alice.username, bob.username])

    def test_new_username_is_trimmed(self, client: TestClient, alice: User, db_session: Session) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"username": "  alice-trimmed  "})
        assert response.status_code == status.HTTP_200_OK
        assert db_session.get(User, alice.id).username == "alice-trimmed"


def test_login_trims_username(client: TestClient, alice: User) -> None:
    response = client.post(
        "/users/login", json={"username": f"  {alice.username} ", "password": TEST_PASSWORD}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["_id"] == alice.id


def test_login_blank_username_rejected(client: TestClient) -> None:
    response = client.post("/users/login", json={"username": "  ", "password": TEST_PASSWORD})
    assert response.status_code == 422


def _outside_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return True
    return False


class TestPasswordHashingOffLoop:
    """bcrypt work happens in the threadpool so other requests keep being served."""

    @pytest.fixture()
    def hashing_threads(self, monkeypatch: pytest.MonkeyPatch) -> list[bool]:
        """Record, for every hash or check, whether it ran outside the event loop."""
        calls: list[bool] = []
        real_hash, real_verify = security.hash_password, security.verify_password

        def hash_password(password: str) -> str:
            calls.append(_outside_event_loop())
            return real_hash(password)

        def verify_password(password: str, password_hash: str) -> bool:
            calls.append(_outside_event_loop())
            return real_verify(password, password_hash)

        monkeypatch.setattr(security, "hash_password", hash_password)
        monkeypatch.setattr(security, "verify_password", verify_password)
        return calls

    def test_register_hashes_off_loop(self, client: TestClient, hashing_threads: list[bool]) -> None:
        assert _register(client, "threaded1").status_code == status.HTTP_201_CREATED
        assert hashing_threads == [True]

    def test_login_checks_off_loop(
        self, client: TestClient, alice: User, hashing_threads: list[bool]
    ) -> None:
        response = client.post("/users/login", json={"username": alice.username, "password": "wrong"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert hashing_threads == [True]

    def test_edit_rehashes_off_loop(
        self, client: TestClient, alice: User, hashing_threads: list[bool]
    ) -> None:
        response = client.patch(f"/edit-user/{alice.id}", json={"password": "N3wPassw0rd!"})
        assert response.status_code == status.HTTP_200_OK
        assert hashing_threads == [True]
