"""
app/schemas/user.py

Pydantic models for user request validation.
Field names follow the stored document layout (camelCase natural ID).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from utils.validation_utils import (
    MAX_PASSWORD_BYTES,
    MAX_TEXT_LENGTH,
    normalize_email,
    sanitize_input,
    validate_email,
    validate_password,
    validate_phone_number,
)


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not validate_email(v):
        raise ValueError("Invalid email format")
    return normalize_email(v)


def _check_phone(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not validate_phone_number(v):
        raise ValueError("Invalid phone number")
    return v.strip()


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not validate_password(v):
        raise ValueError(f"Password must be 1 to {MAX_PASSWORD_BYTES} bytes long")
    return v


class RegisterRequest(BaseModel):
    """Request schema for /register."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Plaintext password, hashed before storage")
    phone: Optional[str] = Field(default=None, description="Contact phone number")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return _check_phone(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _check_password(v)


class LoginRequest(BaseModel):
    """Request schema for /login."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plaintext password")

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class UserFields(BaseModel):
    """
    Writable user fields. Unknown fields are dropped, and the natural ID
    (userId) is never accepted from clients.
    """

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    address: Optional[List[str]] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return _check_phone(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _check_password(v)

    @field_validator("username", "role", "status")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        v = sanitize_input(v)
        if v is not None and len(v) > MAX_TEXT_LENGTH:
            raise ValueError(f"Must be at most {MAX_TEXT_LENGTH} characters")
        return v

    def to_document(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserCreate(UserFields):
    """Request schema for /create."""


class UserUpdate(UserFields):
    """Request schema for /update/{id} (partial update)."""
