"""Waitlist management routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from clubhouse.core.constants import Permission, WaitlistStatus
from clubhouse.core.responses import error_response, success_response
from clubhouse.db.session import get_session
from clubhouse.models.auth_session import AuthSession
from clubhouse.models.member import Member
from clubhouse.routers.dependencies import require_auth_session, require_permission
from clubhouse.schemas.member import MemberRead
from clubhouse.schemas.waitlist import WaitlistCreateInput, WaitlistRead, WaitlistUpdateInput
from clubhouse.services import waitlist_service
from clubhouse.services.pagination import resolve_page

router = APIRouter(prefix="/api/v1/waitlist", tags=["Waitlist"])


@router.get("")
def list_waitlist(
    _: Annotated[AuthSession, Depends(require_permission(Permission.VIEW_WAITLIST))],
    session: Annotated[Session, Depends(get_session)],
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int | None, Query(ge=0)] = None,
    page: Annotated[int | None, Query(ge=1)] = None,
    status_filter: Annotated[WaitlistStatus | None, Query(alias="status")] = None,
    sort: Annotated[str | None, Query(max_length=50)] = None,
):
    page_request = resolve_page(limit, offset, page)
    result, error = waitlist_service.list_entries(
        session,
        status=status_filter,
        sort=sort,
        page=page_request,
    )
    if error is not None:
        return error_response(error)

    entries, total = result or ((), 0)
    return success_response(
        {
            "waitlistMembers": [WaitlistRead.model_validate(entry) for entry in entries],
            "total": total,
            "limit": page_request.limit,
            "offset": page_request.offset,
        },
        meta=page_request.meta(total),
    )


@router.get("/{entry_id}")
def get_waitlist_entry(
    entry_id: str,
    caller: Annotated[AuthSession, Depends(require_auth_session)],
    session: Annotated[Session, Depends(get_session)],
):
    entry, error = waitlist_service.get_entry(session, caller, entry_id)
    if error is not None:
        return error_response(error)
    return success_response(WaitlistRead.model_validate(entry))


@router.post("")
def add_to_waitlist(
    payload: WaitlistCreateInput,
    session: Annotated[Session, Depends(get_session)],
):
    entry, error = waitlist_service.add_entry(session, payload)
    if error is not None:
        return error_response(error)
    return success_response(WaitlistRead.model_validate(entry), status.HTTP_201_CREATED)


@router.patch("/{entry_id}")
def update_waitlist_entry(
    entry_id: str,
    payload: WaitlistUpdateInput,
    caller: Annotated[AuthSession, Depends(require_auth_session)],
    session: Annotated[Session, Depends(get_session)],
):
    record, error = waitlist_service.update_entry(session, caller, entry_id, payload)
    if error is not None:
        return error_response(error)

    if isinstance(record, Member):
        return success_response(
            MemberRead.model_validate(record),
            status.HTTP_201_CREATED,
            meta={"moved": True, "from": "waitlist", "to": "member"},
        )
    return success_response(WaitlistRead.model_validate(record))


@router.delete("/{entry_id}")
def delete_waitlist_entry(
    entry_id: str,
    _: Annotated[AuthSession, Depends(require_permission(Permission.UPDATE_WAITLIST))],
    session: Annotated[Session, Depends(get_session)],
):
    error = waitlist_service.delete_entry(session, entry_id)
    if error is not None:
        return error_response(error)
    return success_response({"id": entry_id, "deleted": True})
