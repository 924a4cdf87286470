"""Waitlist entry model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Integer, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from clubhouse.core.constants import WaitlistStatus, enum_values, utcnow
from clubhouse.models.types import UTCDateTime, new_id


class WaitlistMember(SQLModel, table=True):
    """Membership applicant table.

    ``position`` is only meaningful while the entry is pending.
    """

    __tablename__ = "waitlist_member"

    id: str = Field(default_factory=new_id, sa_column=Column(String(36), primary_key=True))
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    first_name: str = Field(sa_column=Column(String(100), nullable=False))
    last_name: str = Field(sa_column=Column(String(100), nullable=False))
    phone: str | None = Field(default=None, sa_column=Column(String(50), nullable=True))
    status: WaitlistStatus = Field(
        default=WaitlistStatus.PENDING,
        sa_column=Column(
            SAEnum(
                WaitlistStatus,
                name="waitlist_status",
                native_enum=False,
                values_callable=enum_values,
            ),
            nullable=False,
        ),
    )
    application_date: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False),
    )
    position: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    reason_for_joining: str | None = Field(
        default=None,
        sa_column=Column(String(2000), nullable=True),
    )
    referred_by: str | None = Field(default=None, sa_column=Column(String(255), nullable=True))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False, onupdate=utcnow),
    )
