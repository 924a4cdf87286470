"""Waitlist request and response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from clubhouse.core.constants import WaitlistStatus
from clubhouse.schemas.common import CamelInput, CamelOutput


class WaitlistCreateInput(CamelInput):
    """Public waitlist application payload."""

    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    reason_for_joining: str | None = Field(default=None, max_length=2000)
    referred_by: str | None = Field(default=None, max_length=255)


class WaitlistUpdateInput(CamelInput):
    """Waitlist update payload, including status changes."""

    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    reason_for_joining: str | None = Field(default=None, max_length=2000)
    referred_by: str | None = Field(default=None, max_length=255)
    status: WaitlistStatus | None = None


SELF_SERVICE_WAITLIST_FIELDS = frozenset(
    {"first_name", "last_name", "phone", "reason_for_joining"}
)
ADMIN_WAITLIST_FIELDS = SELF_SERVICE_WAITLIST_FIELDS | {"email", "referred_by"}


class WaitlistRead(CamelOutput):
    """Waitlist entry as returned by the API."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    status: WaitlistStatus
    application_date: datetime
    position: int | None
    reason_for_joining: str | None
    referred_by: str | None
    created_at: datetime
    updated_at: datetime
