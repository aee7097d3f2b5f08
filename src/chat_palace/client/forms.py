"""Form models for registration, login and profile editing.

These run before any request is made, so a rejected form never reaches the
server. Failures are reported per field.
"""

from __future__ import annotations

import re

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

USERNAME_MIN = 5
USERNAME_MAX = 20

PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,25}$"
)
PASSWORD_RULE = (
    "Password must be at least: one lower case, one upper case, one number, "
    "one special symbol and length to be between 8 and 25"
)

_url_adapter = TypeAdapter(AnyHttpUrl)


def _check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Field is required")
    if len(value) < USERNAME_MIN:
        raise ValueError(f"Username must be at least {USERNAME_MIN} symbols length")
    if len(value) > USERNAME_MAX:
        raise ValueError(f"Username can be up to {USERNAME_MAX} symbols length")
    return value


def _check_profile_image(value: str) -> str:
    value = value.strip()
    if value:
        try:
            _url_adapter.validate_python(value)
        except ValidationError as err:
            raise ValueError("Must be valid URL") from err
    return value


def _check_password(value: str) -> str:
    value = value.strip()
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULE)
    return value


class RegistrationForm(BaseModel):
    username: str
    profile_image: str = ""
    password: str
    password_repeat: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str) -> str:
        return _check_profile_image(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

    @model_validator(mode="after")
    def passwords_match(self) -> RegistrationForm:
        if self.password_repeat.strip() != self.password:
            raise ValueError("Passwords must match")
        return self


class LoginForm(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v


class EditUserForm(BaseModel):
    """Profile edit; a blank password means "keep the current one"."""

    username: str
    profile_image: str = ""
    password: str = ""

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str) -> str:
        return _check_profile_image(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v.strip():
            return ""
        return _check_password(v)


def field_errors(err: ValidationError) -> dict[str, str]:
    """Map a validation error to ``{field: first message}``.

    Errors not tied to one field (such as mismatched passwords) are reported
    under ``password_repeat`` when that is what they concern, else ``form``.
    """
    errors: dict[str, str] = {}
    for item in err.errors():
        message = str(item["msg"]).removeprefix("Value error, ")
        if item["loc"]:
            key = str(item["loc"][0])
        elif "Passwords must match" in message:
            key = "password_repeat"
        else:
            key = "form"
        errors.setdefault(key, message)
    return errors
