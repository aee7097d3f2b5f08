# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
# Minimum bcrypt cost keeps password hashing fast under test.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from chat_palace.client import ChatApp
from chat_palace.core import security
from chat_palace.core.settings import settings
from chat_palace.db.session import Base
from chat_palace.db.session import get_db as app_get_session
from chat_palace.main import app as fastapi_app
from chat_palace.models import Conversation, Message, User

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Passw0rd!"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits and rollbacks issued by the services only touch a savepoint.
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def chat_app(client: TestClient) -> Iterator[ChatApp]:
    """Client containers talking to the in-process API."""
    with ChatApp(http=client) as chat:
        yield chat


def make_user(db: Session, username: str, password: str = TEST_PASSWORD, profile_image: str = "") -> User:
    """Persist a user directly, bypassing the registration endpoint."""
    user = User(
        username=username,
        profile_image=profile_image,
        password_hash=security.hash_password(password),
    )
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def identity(user: User | str) -> dict[str, str]:
    """Return headers asserting the given user's identity."""
    user_id = user if isinstance(user, str) else user.id
    return {settings.identity_header: user_id}


@pytest.fixture()
def alice(db_session: Session) -> User:
    """Create and return the primary test user."""
    return make_user(db_session, "alice12345", profile_image="https://example.com/alice.png")


@pytest.fixture()
def bob(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, "bob123456")


@pytest.fixture()
def carol(db_session: Session) -> User:
    """A user who takes part in none of the shared conversations."""
    return make_user(db_session, "carol9876")


@pytest.fixture()
def conversation(db_session: Session, alice: User, bob: User) -> Conversation:
    """Conversation with alice as user1 and bob as user2."""
    conversation = Conversation(user1=alice.id, user2=bob.id, has_unread_messages=False)
    db_session.add(conversation)
    db_session.flush()
    db_session.refresh(conversation)
    return conversation


@pytest.fixture()
def message(db_session: Session, conversation: Conversation, alice: User) -> Message:
    """A message from alice in the shared conversation."""
    message = Message(
        conversation_id=conversation.id,
        sender_id=alice.id,
        content="first",
        likes=[],
    )
    db_session.add(message)
    db_session.flush()
    db_session.refresh(message)
    return message
