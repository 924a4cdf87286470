"""Database access helpers for admin users."""

from __future__ import annotations

from sqlmodel import Session

from clubhouse.models.admin_user import AdminUser


def get_admin_by_id(session: Session, admin_id: str) -> AdminUser | None:
    """Return admin by primary key."""

    return session.get(AdminUser, admin_id)


def create_admin(session: Session, admin_user: AdminUser, *, commit: bool = True) -> AdminUser:
    """Persist a new admin user."""

    session.add(admin_user)
    if commit:
        session.commit()
        session.refresh(admin_user)
    return admin_user
