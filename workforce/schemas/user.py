"""Pydantic schemas for users, registration and tokens."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

from workforce.core.enums import Role

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{3,64}$")


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


def _check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    return v


# ── Registration / admin creation ──────────────────────────────────
class RegisterRequest(BaseModel):
    username: str
    password: str
    name: str
    email: str
    department: str | None = None

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        v = v.strip()
        if not _USERNAME_RE.match(v):
            raise ValueError("Username must be 3-64 letters, digits, '.', '_' or '-'")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)


class UserCreate(RegisterRequest):
    role: Role = Role.EMPLOYEE


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    name: str
    role: Role
    department: str | None
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    department: str | None = None
    password: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return _normalise_email(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return _check_password(v) if v is not None else v


# ── Tokens ──────────────────────────────────────────────────────────
class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str
