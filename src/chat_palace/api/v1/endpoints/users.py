"""User directory and authentication endpoints for the Chat Palace API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from chat_palace.models import User
from chat_palace.schemas.user import LoginRequest, UserCreate, UserResponse, UserUpdate
from chat_palace.services import user_service
from chat_palace.services.errors import (
    InvalidCredentialsError,
    UsernameTakenError,
    UserNotFoundError,
    UserUpdateError,
)

from ..dependencies import SessionDep

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: SessionDep) -> list[User]:
    """List all registered users."""
    return list(user_service.get_users(db))


# Handlers that hash or check passwords are plain functions so bcrypt runs in
# the threadpool instead of on the event loop.
@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: SessionDep) -> User:
    """Register a new user with a unique username."""
    try:
        return user_service.register_user(db, payload)
    except UsernameTakenError as err:
        logger.warning("Registration rejected, username taken: %s", err.username)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        ) from err


@router.post("/users/login", response_model=UserResponse)
def login(payload: LoginRequest, db: SessionDep) -> User:
    """Check a username/password pair and return the matching user."""
    try:
        return user_service.authenticate(db, payload.username, payload.password)
    except InvalidCredentialsError as err:
        logger.warning("Failed login for username %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(err),
        ) from err


@router.patch("/edit-user/{user_id}")
def edit_user(user_id: str, payload: UserUpdate, db: SessionDep) -> dict[str, str]:
    """Edit a user's username, profile image and optionally password."""
    try:
        user_service.update_user(db, user_id, payload)
    except UsernameTakenError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        ) from err
    except UserUpdateError as err:
        logger.warning("%s", err)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user.",
        ) from err
    return {"success": "User updated successfully."}


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: SessionDep) -> User:
    """Get a specific user by ID."""
    try:
        return user_service.get_user(db, user_id)
    except UserNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        ) from err
