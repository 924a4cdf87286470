"""Bearer token session store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from sqlmodel import Session

from clubhouse.core.config import get_settings
from clubhouse.core.constants import AdminRole, UserRole, utcnow
from clubhouse.core.security import generate_session_token
from clubhouse.models.auth_session import AuthSession
from clubhouse.repositories import session_repo

logger = logging.getLogger("clubhouse.auth")

BEARER_PREFIX = "Bearer "


def parse_bearer_token(authorization_header: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header."""

    if authorization_header is None or not authorization_header.startswith(BEARER_PREFIX):
        return None
    token = authorization_header[len(BEARER_PREFIX) :].strip()
    return token or None


def create_session(
    session: Session,
    *,
    user_id: str,
    email: str,
    role: UserRole,
    admin_role: AdminRole | None,
    permissions: Sequence[str],
    commit: bool = True,
) -> AuthSession:
    """Mint a session that expires one TTL after now."""

    now = utcnow()
    auth_session = AuthSession(
        token=generate_session_token(),
        user_id=user_id,
        email=email,
        role=role,
        admin_role=admin_role,
        permissions=list(permissions),
        created_at=now,
        expires_at=now + timedelta(hours=get_settings().session_ttl_hours),
    )
    return session_repo.create_session(session, auth_session, commit=commit)


def get_active_session(session: Session, token: str) -> AuthSession | None:
    """Return the live session for ``token``; an expired one is deleted instead."""

    auth_session = session_repo.get_session_by_token(session, token)
    if auth_session is None:
        return None

    if auth_session.expires_at <= utcnow():
        user_id = auth_session.user_id
        session_repo.delete_sessions(session, [auth_session])
        logger.info("Purged expired session for user %s", user_id)
        return None

    return auth_session


def revoke_session(session: Session, token: str, *, commit: bool = True) -> bool:
    """Delete the session for ``token`` and report whether one existed."""

    auth_session = session_repo.get_session_by_token(session, token)
    if auth_session is None:
        return False
    session_repo.delete_sessions(session, [auth_session], commit=commit)
    return True


def revoke_user_sessions(session: Session, user_id: str, *, commit: bool = True) -> int:
    """Delete every session owned by ``user_id``."""

    return session_repo.delete_sessions(
        session,
        session_repo.list_sessions_for_user(session, user_id),
        commit=commit,
    )


def purge_expired_sessions(session: Session) -> int:
    """Delete all sessions that are past their expiry."""

    expired = session_repo.list_sessions_expired_at(session, utcnow())
    removed = session_repo.delete_sessions(session, expired)
    if removed:
        logger.info("Purged %d expired sessions", removed)
    return removed
