"""User-related Pydantic schemas."""

from pydantic import Field, field_validator, model_validator

from .base import ApiModel


def _strip_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Username must not be blank")
    return value


class UserCreate(ApiModel):
    """Schema for registering a new user."""

    username: str = Field(..., min_length=1, max_length=64, description="Unique login name")
    profile_image: str = Field("", description="Profile image URL")
    password: str = Field(..., min_length=1, description="Plain-text password, hashed before storage")
    password_repeat: str | None = Field(None, description="Optional confirmation of the password")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank usernames."""
        return _strip_username(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "UserCreate":
        """Reject a confirmation that differs from the password."""
        if self.password_repeat is not None and self.password_repeat != self.password:
            raise ValueError("Passwords must match")
        return self


class LoginRequest(ApiModel):
    """Schema for login submissions."""

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _strip_username(v)


class UserUpdate(ApiModel):
    """Schema for editing a user; omitted fields are left untouched."""

    username: str | None = Field(None, min_length=1, max_length=64)
    profile_image: str | None = None
    password: str | None = Field(None, description="New password; blank keeps the current one")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        """Apply the registration rule to a new username."""
        return _strip_username(v) if v is not None else None


class UserResponse(ApiModel):
    """User information returned by the API. Never includes the password hash."""

    id: str = Field(..., alias="_id")
    username: str
    profile_image: str
