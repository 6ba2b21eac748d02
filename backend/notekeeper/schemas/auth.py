"""Authentication schemas."""
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class SignUpForm(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=4)
    confirm_password: str

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password is required")
        return value

    @model_validator(mode="after")
    def passwords_match(self) -> "SignUpForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginForm(BaseModel):
    """User login request."""

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required")
        return value

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password is required")
        return value


class PasswordStrength(str, Enum):
    """Coarse strength rating shown while choosing a password."""

    EMPTY = ""
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


def password_strength(password: str) -> PasswordStrength:
    """Rate a password by length alone."""
    if not password:
        return PasswordStrength.EMPTY
    if len(password) < 4:
        return PasswordStrength.WEAK
    if len(password) < 8:
        return PasswordStrength.MEDIUM
    return PasswordStrength.STRONG
