"""Member request and response schemas."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlsplit

from pydantic import Field, field_validator

from clubhouse.core.constants import MemberStatus
from clubhouse.schemas.common import CamelInput, CamelOutput


class AddressInput(CamelInput):
    """Postal address."""

    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    country: str = Field(min_length=1, max_length=100)


class PreferencesInput(CamelInput):
    """Notification and visibility preferences; omitted keys keep their value."""

    receive_emails: bool | None = None
    receive_notifications: bool | None = None
    is_public_profile: bool | None = None


class _MemberProfileInput(CamelInput):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    profile_picture: str | None = Field(default=None, max_length=500)
    bio: str | None = Field(default=None, max_length=2000)
    address: AddressInput | None = None
    preferences: PreferencesInput | None = None

    @field_validator("profile_picture")
    @classmethod
    def _validate_profile_picture(cls, value: str | None) -> str | None:
        if value is None:
            return None

        parsed = urlsplit(value)
        if parsed.scheme:
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ValueError("profilePicture must be a valid http(s) URL")
            return value

        if value.startswith("/") and not value.startswith("//"):
            return value

        raise ValueError("profilePicture must be a valid http(s) URL or root-relative path")


class MemberCreateInput(_MemberProfileInput):
    """Admin member create payload."""

    email: str | None = Field(default=None, max_length=255)


class MemberUpdateInput(_MemberProfileInput):
    """Member update payload; admins may also change email and status."""

    email: str | None = Field(default=None, max_length=255)
    status: MemberStatus | None = None


SELF_SERVICE_MEMBER_FIELDS = frozenset(
    {"first_name", "last_name", "phone", "bio", "profile_picture", "address", "preferences"}
)
ADMIN_MEMBER_FIELDS = SELF_SERVICE_MEMBER_FIELDS | {"email", "status"}


class AddressRead(CamelOutput):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class PreferencesRead(CamelOutput):
    receive_emails: bool
    receive_notifications: bool
    is_public_profile: bool


class MemberRead(CamelOutput):
    """Member as returned by the API."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    status: MemberStatus
    member_since: datetime
    membership_id: str
    profile_picture: str | None
    bio: str | None
    address: AddressRead | None
    preferences: PreferencesRead | None
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime
