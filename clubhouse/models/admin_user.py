"""Admin user model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from clubhouse.core.constants import AdminRole, enum_values, utcnow
from clubhouse.models.types import UTCDateTime, new_id


class AdminUser(SQLModel, table=True):
    """Admin profile table.

    ``permissions`` is resolved from the sub-role when the admin is created and
    is not recomputed afterwards.
    """

    __tablename__ = "admin_user"

    id: str = Field(default_factory=new_id, sa_column=Column(String(36), primary_key=True))
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    first_name: str = Field(sa_column=Column(String(100), nullable=False))
    last_name: str = Field(sa_column=Column(String(100), nullable=False))
    admin_role: AdminRole = Field(
        sa_column=Column(
            SAEnum(
                AdminRole,
                name="admin_user_role",
                native_enum=False,
                values_callable=enum_values,
            ),
            nullable=False,
        )
    )
    permissions: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
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
