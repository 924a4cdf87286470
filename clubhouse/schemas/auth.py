"""Authentication schema objects."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from clubhouse.core.constants import AdminRole, UserRole
from clubhouse.schemas.common import CamelInput, CamelModel


class RegistrationInput(CamelInput):
    """Self registration payload.

    Every field is optional here so the service can report missing fields in
    its own validation order.
    """

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    confirm_password: str | None = Field(default=None, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    reason_for_joining: str | None = Field(default=None, max_length=2000)
    referred_by: str | None = Field(default=None, max_length=255)


class AdminRegistrationInput(CamelInput):
    """Admin account creation payload."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    confirm_password: str | None = Field(default=None, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    admin_role: str | None = Field(default=None, max_length=50)


class LoginInput(CamelInput):
    """Login payload."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class AuthUser(CamelModel):
    """User summary returned with a token."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    admin_role: AdminRole | None = None


class AuthResponse(CamelModel):
    """Token issued by register, login and refresh."""

    user: AuthUser
    token: str
    expires_at: datetime


class AdminCreated(CamelModel):
    """Result of admin registration."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.ADMIN
    admin_role: AdminRole
    created: bool = True


class LogoutResult(CamelModel):
    """Result of logout."""

    logged_out: bool = True
    session_terminated: bool
