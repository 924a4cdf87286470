"""Application-wide constants and shared values."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum, StrEnum


class MemberStatus(StrEnum):
    """Supported member status values."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class WaitlistStatus(StrEnum):
    """Supported waitlist status values.

    ``PENDING`` is the only non-terminal state.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(StrEnum):
    """Account roles carried by credentials and sessions."""

    ADMIN = "admin"
    MEMBER = "member"
    WAITLIST = "waitlist"
    GUEST = "guest"


class AdminRole(StrEnum):
    """Admin sub-roles for finer grained control."""

    SUPER_ADMIN = "super_admin"
    MEMBERSHIP_ADMIN = "membership_admin"
    CONTENT_ADMIN = "content_admin"
    SUPPORT_ADMIN = "support_admin"


class Permission(StrEnum):
    """Permissions checked by the member and waitlist endpoints."""

    VIEW_MEMBERS = "view_members"
    CREATE_MEMBER = "create_member"
    UPDATE_MEMBER = "update_member"
    DELETE_MEMBER = "delete_member"

    VIEW_WAITLIST = "view_waitlist"
    UPDATE_WAITLIST = "update_waitlist"
    APPROVE_WAITLIST = "approve_waitlist"

    ASSIGN_ADMIN = "assign_admin"
    REVOKE_ADMIN = "revoke_admin"
    SYSTEM_SETTINGS = "system_settings"

    UPDATE_OWN_PROFILE = "update_own_profile"
    VIEW_OWN_PROFILE = "view_own_profile"


_OWN_PROFILE_PERMISSIONS = (Permission.VIEW_OWN_PROFILE, Permission.UPDATE_OWN_PROFILE)

ROLE_PERMISSIONS: dict[UserRole, tuple[Permission, ...]] = {
    UserRole.ADMIN: (
        Permission.VIEW_MEMBERS,
        Permission.CREATE_MEMBER,
        Permission.UPDATE_MEMBER,
        Permission.DELETE_MEMBER,
        Permission.VIEW_WAITLIST,
        Permission.UPDATE_WAITLIST,
        Permission.APPROVE_WAITLIST,
        *_OWN_PROFILE_PERMISSIONS,
    ),
    UserRole.MEMBER: _OWN_PROFILE_PERMISSIONS,
    UserRole.WAITLIST: _OWN_PROFILE_PERMISSIONS,
    UserRole.GUEST: (),
}

ADMIN_ROLE_PERMISSIONS: dict[AdminRole, tuple[Permission, ...]] = {
    AdminRole.SUPER_ADMIN: (
        *ROLE_PERMISSIONS[UserRole.ADMIN],
        Permission.ASSIGN_ADMIN,
        Permission.REVOKE_ADMIN,
        Permission.SYSTEM_SETTINGS,
    ),
    AdminRole.MEMBERSHIP_ADMIN: ROLE_PERMISSIONS[UserRole.ADMIN],
    AdminRole.CONTENT_ADMIN: (
        Permission.VIEW_MEMBERS,
        Permission.VIEW_WAITLIST,
        *_OWN_PROFILE_PERMISSIONS,
    ),
    AdminRole.SUPPORT_ADMIN: (
        Permission.VIEW_MEMBERS,
        Permission.VIEW_WAITLIST,
        *_OWN_PROFILE_PERMISSIONS,
    ),
}

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72
MEMBERSHIP_ID_PREFIX = "MEM-"

DEFAULT_MEMBER_PREFERENCES: dict[str, bool] = {
    "receive_emails": True,
    "receive_notifications": True,
    "is_public_profile": False,
}


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Return enum values for SQLAlchemy enum configuration."""

    return [str(item.value) for item in enum_cls]


def utcnow() -> datetime:
    """Return timezone-aware current UTC datetime."""

    return datetime.now(UTC)
