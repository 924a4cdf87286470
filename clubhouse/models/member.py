"""Member model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from clubhouse.core.constants import MemberStatus, enum_values, utcnow
from clubhouse.models.types import UTCDateTime, new_id


class Member(SQLModel, table=True):
    """Active club member table."""

    __tablename__ = "member"

    id: str = Field(default_factory=new_id, sa_column=Column(String(36), primary_key=True))
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    first_name: str = Field(sa_column=Column(String(100), nullable=False))
    last_name: str = Field(sa_column=Column(String(100), nullable=False))
    phone: str | None = Field(default=None, sa_column=Column(String(50), nullable=True))
    status: MemberStatus = Field(
        default=MemberStatus.ACTIVE,
        sa_column=Column(
            SAEnum(
                MemberStatus,
                name="member_status",
                native_enum=False,
                values_callable=enum_values,
            ),
            nullable=False,
        ),
    )
    member_since: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False),
    )
    membership_id: str = Field(sa_column=Column(String(20), unique=True, nullable=False))
    profile_picture: str | None = Field(default=None, sa_column=Column(String(500), nullable=True))
    bio: str | None = Field(default=None, sa_column=Column(String(2000), nullable=True))
    address: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    preferences: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    last_login: datetime | None = Field(
        default=None,
        sa_column=Column(UTCDateTime(), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False, onupdate=utcnow),
    )
