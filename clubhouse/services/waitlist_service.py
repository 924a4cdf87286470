"""Waitlist domain services.

Pending entries hold dense 1..N positions ordered by application date; every
insert, removal and status change ends with ``recalculate_positions``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import case
from sqlmodel import Session, col

from clubhouse.core.constants import Permission, UserRole, WaitlistStatus
from clubhouse.core.errors import (
    INVALID_EMAIL,
    MAX_MEMBERS_REACHED,
    MAX_WAITLIST_REACHED,
    MISSING_FIELDS,
    ServiceError,
    conflict,
    forbidden,
    not_found,
)
from clubhouse.models.auth_session import AuthSession
from clubhouse.models.member import Member
from clubhouse.models.waitlist_member import WaitlistMember
from clubhouse.repositories import credential_repo, member_repo, waitlist_repo
from clubhouse.schemas.waitlist import (
    ADMIN_WAITLIST_FIELDS,
    SELF_SERVICE_WAITLIST_FIELDS,
    WaitlistCreateInput,
    WaitlistUpdateInput,
)
from clubhouse.services import session_service
from clubhouse.services.authorization import has_permission, is_self
from clubhouse.services.capacity import (
    has_member_capacity,
    has_waitlist_capacity,
    membership_lock,
)
from clubhouse.services.member_service import is_valid_email, new_member
from clubhouse.services.pagination import PageRequest, resolve_sort

logger = logging.getLogger("clubhouse.waitlist")

ENTRY_NOT_FOUND = not_found("Waitlist member not found")

WAITLIST_SORT_COLUMNS = {
    "applicationDate": col(WaitlistMember.application_date),
    "position": col(WaitlistMember.position),
    "lastName": col(WaitlistMember.last_name),
    "firstName": col(WaitlistMember.first_name),
    "email": col(WaitlistMember.email),
}
_DEFAULT_WAITLIST_ORDER = (
    case((col(WaitlistMember.status) == WaitlistStatus.PENDING, 0), else_=1),
    col(WaitlistMember.position).asc(),
    col(WaitlistMember.application_date).asc(),
)


def recalculate_positions(session: Session) -> None:
    """Assign 1..N to pending entries by application date and clear the rest.

    Changes are staged on ``session``; the caller commits.
    """

    for index, entry in enumerate(waitlist_repo.list_pending_by_application(session), start=1):
        if entry.position != index:
            entry.position = index
            waitlist_repo.update_entry(session, entry, commit=False)

    for entry in waitlist_repo.list_positioned_non_pending(session):
        entry.position = None
        waitlist_repo.update_entry(session, entry, commit=False)


def enqueue(
    session: Session,
    *,
    email: str,
    first_name: str,
    last_name: str,
    phone: str | None = None,
    reason_for_joining: str | None = None,
    referred_by: str | None = None,
) -> WaitlistMember:
    """Stage a new pending entry at the back of the queue.

    The caller holds ``membership_lock``, has checked capacity and commits.
    """

    entry = WaitlistMember(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        status=WaitlistStatus.PENDING,
        position=waitlist_repo.count_pending(session) + 1,
        reason_for_joining=reason_for_joining,
        referred_by=referred_by,
    )
    waitlist_repo.create_entry(session, entry, commit=False)
    recalculate_positions(session)
    return entry


def list_entries(
    session: Session,
    *,
    status: WaitlistStatus | None,
    sort: str | None,
    page: PageRequest,
) -> tuple[tuple[Sequence[WaitlistMember], int] | None, ServiceError | None]:
    """Return one page of the waitlist with the filtered total."""

    order_by, error = resolve_sort(sort, WAITLIST_SORT_COLUMNS, _DEFAULT_WAITLIST_ORDER)
    if error is not None or order_by is None:
        return None, error

    return (
        waitlist_repo.list_entries(
            session,
            status=status,
            order_by=order_by,
            offset=page.offset,
            limit=page.limit,
        ),
        None,
    )


def get_entry(
    session: Session,
    caller: AuthSession,
    entry_id: str,
) -> tuple[WaitlistMember | None, ServiceError | None]:
    """Return an entry visible to ``caller``."""

    if not has_permission(caller, Permission.VIEW_WAITLIST) and not is_self(
        caller, UserRole.WAITLIST, entry_id
    ):
        return None, forbidden("Not allowed to view this waitlist member")

    entry = waitlist_repo.get_entry_by_id(session, entry_id)
    if entry is None:
        return None, ENTRY_NOT_FOUND
    return entry, None


def add_entry(
    session: Session,
    input_data: WaitlistCreateInput,
) -> tuple[WaitlistMember | None, ServiceError | None]:
    """Accept a public application onto the waitlist."""

    if input_data.email is None or input_data.first_name is None or input_data.last_name is None:
        return None, MISSING_FIELDS
    if not is_valid_email(input_data.email):
        return None, INVALID_EMAIL

    with membership_lock:
        if waitlist_repo.get_entry_by_email(session, input_data.email) is not None:
            return None, conflict("email_conflict", "Email already in waitlist")
        if member_repo.get_member_by_email(session, input_data.email) is not None:
            return None, conflict("email_conflict", "Email already belongs to an active member")
        if not has_waitlist_capacity(session):
            return None, MAX_WAITLIST_REACHED

        entry = enqueue(
            session,
            email=input_data.email,
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            phone=input_data.phone,
            reason_for_joining=input_data.reason_for_joining,
            referred_by=input_data.referred_by,
        )
        session.commit()
        session.refresh(entry)

    logger.info("Added waitlist entry %s at position %s", entry.id, entry.position)
    return entry, None


def update_entry(
    session: Session,
    caller: AuthSession,
    entry_id: str,
    input_data: WaitlistUpdateInput,
) -> tuple[WaitlistMember | Member | None, ServiceError | None]:
    """Update an entry, or move it through the pending -> approved/rejected machine.

    Approval returns the newly created ``Member`` instead of the entry.
    """

    is_admin_update = has_permission(caller, Permission.UPDATE_WAITLIST)
    if not is_admin_update and not is_self(caller, UserRole.WAITLIST, entry_id):
        return None, forbidden("Not allowed to update this waitlist member")

    with membership_lock:
        entry = waitlist_repo.get_entry_by_id(session, entry_id)
        if entry is None:
            return None, ENTRY_NOT_FOUND

        requested_status = input_data.status if is_admin_update else None
        if requested_status == WaitlistStatus.APPROVED and entry.status != WaitlistStatus.APPROVED:
            return _approve(session, caller, entry)

        status_changed = requested_status is not None and requested_status != entry.status
        if status_changed and entry.status != WaitlistStatus.PENDING:
            return None, _invalid_transition(entry.status, requested_status)

        allowed_fields = ADMIN_WAITLIST_FIELDS if is_admin_update else SELF_SERVICE_WAITLIST_FIELDS
        changes = {
            name: value
            for name, value in input_data.model_dump(exclude_unset=True, exclude_none=True).items()
            if name in allowed_fields
        }

        new_email = changes.pop("email", None)
        if new_email is not None and new_email != entry.email:
            error = _change_entry_email(session, entry, new_email)
            if error is not None:
                return None, error

        for name, value in changes.items():
            setattr(entry, name, value)

        if status_changed and requested_status is not None:
            entry.status = requested_status

        waitlist_repo.update_entry(session, entry, commit=False)
        if status_changed:
            recalculate_positions(session)
        session.commit()
        session.refresh(entry)

    if status_changed:
        logger.info("Waitlist entry %s moved to %s", entry.id, entry.status)
    return entry, None


def delete_entry(session: Session, entry_id: str) -> ServiceError | None:
    """Hard-delete an entry with its login and sessions, then close the gap in the queue."""

    with membership_lock:
        entry = waitlist_repo.get_entry_by_id(session, entry_id)
        if entry is None:
            return ENTRY_NOT_FOUND

        credential = credential_repo.get_credential_by_account_id(session, entry_id)
        if credential is not None:
            credential_repo.delete_credential(session, credential, commit=False)
        session_service.revoke_user_sessions(session, entry_id, commit=False)
        waitlist_repo.delete_entry(session, entry, commit=False)
        recalculate_positions(session)
        session.commit()

    logger.info("Deleted waitlist entry %s", entry_id)
    return None


def _approve(
    session: Session,
    caller: AuthSession,
    entry: WaitlistMember,
) -> tuple[Member | None, ServiceError | None]:
    if not has_permission(caller, Permission.APPROVE_WAITLIST):
        return None, forbidden("Unauthorized to approve waitlist members")
    if entry.status != WaitlistStatus.PENDING:
        return None, _invalid_transition(entry.status, WaitlistStatus.APPROVED)
    if not has_member_capacity(session):
        return None, MAX_MEMBERS_REACHED
    if member_repo.get_member_by_email(session, entry.email) is not None:
        return None, conflict("email_conflict", "Email already belongs to an active member")

    member = new_member(
        session,
        email=entry.email,
        first_name=entry.first_name,
        last_name=entry.last_name,
        phone=entry.phone,
    )
    member_repo.create_member(session, member, commit=False)

    entry.status = WaitlistStatus.APPROVED
    waitlist_repo.update_entry(session, entry, commit=False)

    credential = credential_repo.get_credential_by_account_id(session, entry.id)
    if credential is not None:
        credential.account_id = member.id
        credential.role = UserRole.MEMBER
        credential_repo.update_credential(session, credential, commit=False)
    session_service.revoke_user_sessions(session, entry.id, commit=False)

    recalculate_positions(session)
    session.commit()
    session.refresh(member)

    logger.info("Approved waitlist entry %s as member %s", entry.id, member.id)
    return member, None


def _change_entry_email(session: Session, entry: WaitlistMember, new_email: str) -> ServiceError | None:
    if not is_valid_email(new_email):
        return INVALID_EMAIL
    other_entry = waitlist_repo.get_entry_by_email(session, new_email)
    if other_entry is not None and other_entry.id != entry.id:
        return conflict("email_conflict", "Email already in waitlist")
    if member_repo.get_member_by_email(session, new_email) is not None:
        return conflict("email_conflict", "Email already belongs to an active member")
    credential = credential_repo.get_credential_by_email(session, new_email)
    if credential is not None and credential.account_id != entry.id:
        return conflict("email_conflict", "Email is already registered")

    linked_credential = credential_repo.get_credential_by_account_id(session, entry.id)
    if linked_credential is not None:
        linked_credential.email = new_email
        credential_repo.update_credential(session, linked_credential, commit=False)
    entry.email = new_email
    return None


def _invalid_transition(current: WaitlistStatus, requested: WaitlistStatus) -> ServiceError:
    return conflict(
        "invalid_transition",
        f"Cannot change waitlist status from {current} to {requested}",
    )
