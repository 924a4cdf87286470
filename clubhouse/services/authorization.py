"""Role to permission resolution."""

from __future__ import annotations

from clubhouse.core.constants import (
    ADMIN_ROLE_PERMISSIONS,
    ROLE_PERMISSIONS,
    AdminRole,
    Permission,
    UserRole,
)
from clubhouse.models.auth_session import AuthSession


def resolve_permissions(role: UserRole, admin_role: AdminRole | None = None) -> list[str]:
    """Return the permission set for a role, or for an admin sub-role when given."""

    if role == UserRole.ADMIN and admin_role is not None:
        return [str(permission) for permission in ADMIN_ROLE_PERMISSIONS[admin_role]]
    return [str(permission) for permission in ROLE_PERMISSIONS.get(role, ())]


def has_permission(auth_session: AuthSession | None, permission: Permission) -> bool:
    """Return whether the session's permission snapshot includes ``permission``."""

    if auth_session is None:
        return False
    return str(permission) in auth_session.permissions


def is_self(auth_session: AuthSession | None, role: UserRole, account_id: str) -> bool:
    """Return whether the caller owns the ``role`` record ``account_id``."""

    if auth_session is None:
        return False
    return auth_session.role == role and auth_session.user_id == account_id


def parse_admin_role(raw_value: str) -> AdminRole | None:
    """Return the matching admin sub-role or ``None``."""

    try:
        return AdminRole(raw_value)
    except ValueError:
        return None
