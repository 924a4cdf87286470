"""Database access helpers for bearer token sessions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlmodel import Session, col, select

from clubhouse.models.auth_session import AuthSession


def get_session_by_token(session: Session, token: str) -> AuthSession | None:
    """Return session by token."""

    return session.get(AuthSession, token)


def list_sessions_for_user(session: Session, user_id: str) -> Sequence[AuthSession]:
    """Return every session owned by ``user_id``."""

    return session.exec(select(AuthSession).where(col(AuthSession.user_id) == user_id)).all()


def list_sessions_expired_at(session: Session, moment: datetime) -> Sequence[AuthSession]:
    """Return sessions whose expiry is at or before ``moment``."""

    return session.exec(select(AuthSession).where(col(AuthSession.expires_at) <= moment)).all()


def create_session(session: Session, auth_session: AuthSession, *, commit: bool = True) -> AuthSession:
    """Persist a new session."""

    session.add(auth_session)
    if commit:
        session.commit()
        session.refresh(auth_session)
    return auth_session


def delete_sessions(
    session: Session,
    auth_sessions: Sequence[AuthSession],
    *,
    commit: bool = True,
) -> int:
    """Hard-delete the given sessions and return how many were removed."""

    for auth_session in auth_sessions:
        session.delete(auth_session)
    if commit:
        session.commit()
    return len(auth_sessions)
