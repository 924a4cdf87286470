"""Member domain services."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from sqlmodel import Session, col

from clubhouse.core.constants import (
    DEFAULT_MEMBER_PREFERENCES,
    EMAIL_PATTERN,
    MemberStatus,
    Permission,
    UserRole,
    WaitlistStatus,
)
from clubhouse.core.errors import (
    EMAIL_CONFLICT,
    INVALID_EMAIL,
    MAX_MEMBERS_REACHED,
    MISSING_FIELDS,
    ServiceError,
    forbidden,
    not_found,
)
from clubhouse.core.security import generate_membership_id
from clubhouse.models.auth_session import AuthSession
from clubhouse.models.member import Member
from clubhouse.repositories import credential_repo, member_repo, waitlist_repo
from clubhouse.schemas.member import (
    ADMIN_MEMBER_FIELDS,
    SELF_SERVICE_MEMBER_FIELDS,
    MemberCreateInput,
    MemberUpdateInput,
)
from clubhouse.services import session_service
from clubhouse.services.authorization import has_permission, is_self
from clubhouse.services.capacity import has_member_capacity, membership_lock
from clubhouse.services.pagination import PageRequest, resolve_sort

logger = logging.getLogger("clubhouse.members")

MEMBER_NOT_FOUND = not_found("Member not found")

MEMBER_SORT_COLUMNS = {
    "createdAt": col(Member.created_at),
    "memberSince": col(Member.member_since),
    "lastName": col(Member.last_name),
    "firstName": col(Member.first_name),
    "email": col(Member.email),
    "membershipId": col(Member.membership_id),
}
_DEFAULT_MEMBER_ORDER = (col(Member.created_at).asc(), col(Member.id).asc())


def is_valid_email(email: str) -> bool:
    """Return whether ``email`` matches the accepted address shape."""

    return re.fullmatch(EMAIL_PATTERN, email) is not None


def email_in_use(session: Session, email: str, *, ignore_account_id: str | None = None) -> bool:
    """Return whether any credential, member or waitlist entry other than ``ignore_account_id`` uses ``email``."""

    credential = credential_repo.get_credential_by_email(session, email)
    if credential is not None and credential.account_id != ignore_account_id:
        return True
    member = member_repo.get_member_by_email(session, email)
    if member is not None and member.id != ignore_account_id:
        return True
    entry = waitlist_repo.get_entry_by_email(session, email)
    return entry is not None and entry.id != ignore_account_id


def new_member(
    session: Session,
    *,
    email: str,
    first_name: str,
    last_name: str,
    phone: str | None = None,
    profile_picture: str | None = None,
    bio: str | None = None,
    address: dict[str, Any] | None = None,
    preferences: dict[str, Any] | None = None,
) -> Member:
    """Build an active member with a unique membership id and default preferences."""

    membership_id = generate_membership_id()
    while member_repo.membership_id_exists(session, membership_id):
        membership_id = generate_membership_id()

    return Member(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        status=MemberStatus.ACTIVE,
        membership_id=membership_id,
        profile_picture=profile_picture,
        bio=bio,
        address=address,
        preferences={**DEFAULT_MEMBER_PREFERENCES, **(preferences or {})},
    )


def list_members(
    session: Session,
    *,
    status: MemberStatus | None,
    sort: str | None,
    page: PageRequest,
) -> tuple[tuple[Sequence[Member], int] | None, ServiceError | None]:
    """Return one page of members with the filtered total."""

    order_by, error = resolve_sort(sort, MEMBER_SORT_COLUMNS, _DEFAULT_MEMBER_ORDER)
    if error is not None or order_by is None:
        return None, error

    return (
        member_repo.list_members(
            session,
            status=status,
            order_by=order_by,
            offset=page.offset,
            limit=page.limit,
        ),
        None,
    )


def get_member(
    session: Session,
    caller: AuthSession,
    member_id: str,
) -> tuple[Member | None, ServiceError | None]:
    """Return a member visible to ``caller``."""

    if not has_permission(caller, Permission.VIEW_MEMBERS) and not is_self(
        caller, UserRole.MEMBER, member_id
    ):
        return None, forbidden("Not allowed to view this member")

    member = member_repo.get_member_by_id(session, member_id)
    if member is None:
        return None, MEMBER_NOT_FOUND
    return member, None


def create_member(
    session: Session,
    input_data: MemberCreateInput,
) -> tuple[Member | None, ServiceError | None]:
    """Create an active member on behalf of an admin."""

    with membership_lock:
        if not has_member_capacity(session):
            return None, MAX_MEMBERS_REACHED

        if input_data.email is None or input_data.first_name is None or input_data.last_name is None:
            return None, MISSING_FIELDS
        if not is_valid_email(input_data.email):
            return None, INVALID_EMAIL
        if email_in_use(session, input_data.email):
            return None, EMAIL_CONFLICT

        member = new_member(
            session,
            email=input_data.email,
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            phone=input_data.phone,
            profile_picture=input_data.profile_picture,
            bio=input_data.bio,
            address=input_data.address.model_dump() if input_data.address else None,
            preferences=(
                input_data.preferences.model_dump(exclude_none=True)
                if input_data.preferences
                else None
            ),
        )
        member = member_repo.create_member(session, member)

    logger.info("Created member %s (%s)", member.id, member.membership_id)
    return member, None


def update_member(
    session: Session,
    caller: AuthSession,
    member_id: str,
    input_data: MemberUpdateInput,
) -> tuple[Member | None, ServiceError | None]:
    """Apply an admin update, or a self-service update restricted to profile fields."""

    is_admin_update = has_permission(caller, Permission.UPDATE_MEMBER)
    if not is_admin_update and not is_self(caller, UserRole.MEMBER, member_id):
        return None, forbidden("Not allowed to update this member")

    allowed_fields = ADMIN_MEMBER_FIELDS if is_admin_update else SELF_SERVICE_MEMBER_FIELDS
    changes = {
        name: value
        for name, value in input_data.model_dump(exclude_unset=True, exclude_none=True).items()
        if name in allowed_fields
    }

    with membership_lock:
        member = member_repo.get_member_by_id(session, member_id)
        if member is None:
            return None, MEMBER_NOT_FOUND

        new_email = changes.pop("email", None)
        if new_email is not None and new_email != member.email:
            if not is_valid_email(new_email):
                return None, INVALID_EMAIL
            if email_in_use(session, new_email, ignore_account_id=member.id):
                return None, EMAIL_CONFLICT
            credential = credential_repo.get_credential_by_account_id(session, member.id)
            if credential is not None:
                credential.email = new_email
                credential_repo.update_credential(session, credential, commit=False)
            member.email = new_email

        new_status = changes.pop("status", None)
        if new_status is not None and new_status != member.status:
            if new_status == MemberStatus.ACTIVE and not has_member_capacity(session):
                return None, MAX_MEMBERS_REACHED
            member.status = new_status

        preference_changes = changes.pop("preferences", None)
        if preference_changes:
            member.preferences = {
                **DEFAULT_MEMBER_PREFERENCES,
                **(member.preferences or {}),
                **preference_changes,
            }

        for name, value in changes.items():
            setattr(member, name, value)

        member = member_repo.update_member(session, member)

    logger.info(
        "Updated member %s (%s)",
        member.id,
        "admin" if is_admin_update else "self-service",
    )
    return member, None


def delete_member(session: Session, member_id: str) -> ServiceError | None:
    """Hard-delete a member together with their login, sessions and approved application."""

    member = member_repo.get_member_by_id(session, member_id)
    if member is None:
        return MEMBER_NOT_FOUND

    credential = credential_repo.get_credential_by_account_id(session, member_id)
    if credential is not None:
        credential_repo.delete_credential(session, credential, commit=False)
    session_service.revoke_user_sessions(session, member_id, commit=False)
    entry = waitlist_repo.get_entry_by_email(session, member.email)
    if entry is not None and entry.status == WaitlistStatus.APPROVED:
        waitlist_repo.delete_entry(session, entry, commit=False)
    member_repo.delete_member(session, member)

    logger.info("Deleted member %s", member_id)
    return None
