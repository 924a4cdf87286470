"""Database access helpers for waitlist entries."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, col, select

from clubhouse.core.constants import WaitlistStatus
from clubhouse.models.waitlist_member import WaitlistMember


def list_entries(
    session: Session,
    *,
    status: WaitlistStatus | None,
    order_by: Sequence[Any],
    offset: int,
    limit: int,
) -> tuple[Sequence[WaitlistMember], int]:
    """Return one page of waitlist entries and the size of the filtered set."""

    statement = select(WaitlistMember)
    count_statement = select(func.count()).select_from(WaitlistMember)
    if status is not None:
        statement = statement.where(col(WaitlistMember.status) == status)
        count_statement = count_statement.where(col(WaitlistMember.status) == status)

    total = session.exec(count_statement).one()
    entries = session.exec(statement.order_by(*order_by).offset(offset).limit(limit)).all()
    return entries, total


def list_pending_by_application(session: Session) -> Sequence[WaitlistMember]:
    """Return pending entries, earliest application first."""

    return session.exec(
        select(WaitlistMember)
        .where(col(WaitlistMember.status) == WaitlistStatus.PENDING)
        .order_by(col(WaitlistMember.application_date).asc())
    ).all()


def list_positioned_non_pending(session: Session) -> Sequence[WaitlistMember]:
    """Return entries that left the pending set but still hold a position."""

    return session.exec(
        select(WaitlistMember)
        .where(col(WaitlistMember.status) != WaitlistStatus.PENDING)
        .where(col(WaitlistMember.position).is_not(None))
    ).all()


def count_pending(session: Session) -> int:
    """Return the number of pending entries."""

    return session.exec(
        select(func.count())
        .select_from(WaitlistMember)
        .where(col(WaitlistMember.status) == WaitlistStatus.PENDING)
    ).one()


def get_entry_by_id(session: Session, entry_id: str) -> WaitlistMember | None:
    """Return waitlist entry by primary key."""

    return session.get(WaitlistMember, entry_id)


def get_entry_by_email(session: Session, email: str) -> WaitlistMember | None:
    """Return waitlist entry by unique email."""

    return session.exec(select(WaitlistMember).where(col(WaitlistMember.email) == email)).first()


def create_entry(session: Session, entry: WaitlistMember, *, commit: bool = True) -> WaitlistMember:
    """Persist a new waitlist entry."""

    session.add(entry)
    if commit:
        session.commit()
        session.refresh(entry)
    return entry


def update_entry(session: Session, entry: WaitlistMember, *, commit: bool = True) -> WaitlistMember:
    """Persist an updated waitlist entry."""

    session.add(entry)
    if commit:
        session.commit()
        session.refresh(entry)
    return entry


def delete_entry(session: Session, entry: WaitlistMember, *, commit: bool = True) -> None:
    """Hard-delete a waitlist entry."""

    session.delete(entry)
    if commit:
        session.commit()
