"""Database initialization utilities for local development and tests."""

from __future__ import annotations

import logging

from sqlmodel import Session, SQLModel

from clubhouse.core.config import get_settings
from clubhouse.core.constants import AdminRole
from clubhouse.core.security import hash_password
from clubhouse.db.session import engine
from clubhouse.repositories import credential_repo
from clubhouse.services import session_service
from clubhouse.services.auth_service import create_admin_account

logger = logging.getLogger("clubhouse.db")


def create_db_and_tables() -> None:
    """Create all tables from SQLModel metadata."""

    import clubhouse.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_initial_admin() -> None:
    """Seed the bootstrap super admin when not present."""

    settings = get_settings()

    with Session(engine) as session:
        if credential_repo.get_credential_by_email(session, settings.admin_email) is not None:
            return

        admin_user = create_admin_account(
            session,
            email=settings.admin_email,
            password_hash=hash_password(settings.admin_password),
            first_name=settings.admin_first_name,
            last_name=settings.admin_last_name,
            admin_role=AdminRole.SUPER_ADMIN,
        )
        logger.info("Seeded super admin %s", admin_user.email)


def purge_stale_sessions() -> None:
    """Drop sessions that expired while the service was down."""

    with Session(engine) as session:
        session_service.purge_expired_sessions(session)


def init_db() -> None:
    """Initialize tables, seed admin data and clear expired sessions."""

    create_db_and_tables()
    create_initial_admin()
    purge_stale_sessions()
