"""Login credential model."""

from __future__ import annotations

from sqlalchemy import Column, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from clubhouse.core.constants import AdminRole, UserRole, enum_values
from clubhouse.models.types import new_id


class Credential(SQLModel, table=True):
    """Email and password hash for one member, waitlist entrant or admin."""

    __tablename__ = "credential"

    id: str = Field(default_factory=new_id, sa_column=Column(String(36), primary_key=True))
    account_id: str = Field(sa_column=Column(String(36), unique=True, nullable=False))
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    role: UserRole = Field(
        sa_column=Column(
            SAEnum(UserRole, name="user_role", native_enum=False, values_callable=enum_values),
            nullable=False,
        )
    )
    admin_role: AdminRole | None = Field(
        default=None,
        sa_column=Column(
            SAEnum(AdminRole, name="admin_role", native_enum=False, values_callable=enum_values),
            nullable=True,
        ),
    )
