"""Database access helpers for members."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, col, select

from clubhouse.core.constants import MemberStatus
from clubhouse.models.member import Member


def list_members(
    session: Session,
    *,
    status: MemberStatus | None,
    order_by: Sequence[Any],
    offset: int,
    limit: int,
) -> tuple[Sequence[Member], int]:
    """Return one page of members and the size of the filtered set."""

    statement = select(Member)
    count_statement = select(func.count()).select_from(Member)
    if status is not None:
        statement = statement.where(col(Member.status) == status)
        count_statement = count_statement.where(col(Member.status) == status)

    total = session.exec(count_statement).one()
    members = session.exec(statement.order_by(*order_by).offset(offset).limit(limit)).all()
    return members, total


def count_members(session: Session, status: MemberStatus) -> int:
    """Return how many members currently have ``status``."""

    return session.exec(
        select(func.count()).select_from(Member).where(col(Member.status) == status)
    ).one()


def get_member_by_id(session: Session, member_id: str) -> Member | None:
    """Return member by primary key."""

    return session.get(Member, member_id)


def get_member_by_email(session: Session, email: str) -> Member | None:
    """Return member by unique email."""

    return session.exec(select(Member).where(col(Member.email) == email)).first()


def membership_id_exists(session: Session, membership_id: str) -> bool:
    """Return whether a membership id is already taken."""

    statement = select(Member.id).where(col(Member.membership_id) == membership_id)
    return session.exec(statement).first() is not None


def create_member(session: Session, member: Member, *, commit: bool = True) -> Member:
    """Persist a new member."""

    session.add(member)
    if commit:
        session.commit()
        session.refresh(member)
    return member


def update_member(session: Session, member: Member, *, commit: bool = True) -> Member:
    """Persist an updated member."""

    session.add(member)
    if commit:
        session.commit()
        session.refresh(member)
    return member


def delete_member(session: Session, member: Member, *, commit: bool = True) -> None:
    """Hard-delete a member."""

    session.delete(member)
    if commit:
        session.commit()
