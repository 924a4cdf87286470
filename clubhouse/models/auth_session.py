"""Bearer token session model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from clubhouse.core.constants import AdminRole, UserRole, enum_values, utcnow
from clubhouse.models.types import UTCDateTime


class AuthSession(SQLModel, table=True):
    """Live session keyed by its token, with a snapshot of the caller's permissions."""

    __tablename__ = "auth_session"

    token: str = Field(sa_column=Column(String(128), primary_key=True))
    user_id: str = Field(sa_column=Column(String(36), nullable=False, index=True))
    email: str = Field(sa_column=Column(String(255), nullable=False))
    role: UserRole = Field(
        sa_column=Column(
            SAEnum(UserRole, name="session_role", native_enum=False, values_callable=enum_values),
            nullable=False,
        )
    )
    admin_role: AdminRole | None = Field(
        default=None,
        sa_column=Column(
            SAEnum(
                AdminRole,
                name="session_admin_role",
                native_enum=False,
                values_callable=enum_values,
            ),
            nullable=True,
        ),
    )
    permissions: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(), nullable=False),
    )
    expires_at: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False))
