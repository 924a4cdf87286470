"""Member management routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from clubhouse.core.constants import MemberStatus, Permission
from clubhouse.core.responses import error_response, success_response
from clubhouse.db.session import get_session
from clubhouse.models.auth_session import AuthSession
from clubhouse.routers.dependencies import require_auth_session, require_permission
from clubhouse.schemas.member import MemberCreateInput, MemberRead, MemberUpdateInput
from clubhouse.services import member_service
from clubhouse.services.pagination import resolve_page

router = APIRouter(prefix="/api/v1/members", tags=["Members"])


@router.get("")
def list_members(
    _: Annotated[AuthSession, Depends(require_permission(Permission.VIEW_MEMBERS))],
    session: Annotated[Session, Depends(get_session)],
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int | None, Query(ge=0)] = None,
    page: Annotated[int | None, Query(ge=1)] = None,
    status_filter: Annotated[MemberStatus | None, Query(alias="status")] = None,
    sort: Annotated[str | None, Query(max_length=50)] = None,
):
    page_request = resolve_page(limit, offset, page)
    result, error = member_service.list_members(
        session,
        status=status_filter,
        sort=sort,
        page=page_request,
    )
    if error is not None:
        return error_response(error)

    members, total = result or ((), 0)
    return success_response(
        {
            "members": [MemberRead.model_validate(member) for member in members],
            "total": total,
            "limit": page_request.limit,
            "offset": page_request.offset,
        },
        meta=page_request.meta(total),
    )


@router.get("/{member_id}")
def get_member(
    member_id: str,
    caller: Annotated[AuthSession, Depends(require_auth_session)],
    session: Annotated[Session, Depends(get_session)],
):
    member, error = member_service.get_member(session, caller, member_id)
    if error is not None:
        return error_response(error)
    return success_response(MemberRead.model_validate(member))


@router.post("")
def create_member(
    payload: MemberCreateInput,
    _: Annotated[AuthSession, Depends(require_permission(Permission.CREATE_MEMBER))],
    session: Annotated[Session, Depends(get_session)],
):
    member, error = member_service.create_member(session, payload)
    if error is not None:
        return error_response(error)
    return success_response(MemberRead.model_validate(member), status.HTTP_201_CREATED)


@router.patch("/{member_id}")
def update_member(
    member_id: str,
    payload: MemberUpdateInput,
    caller: Annotated[AuthSession, Depends(require_auth_session)],
    session: Annotated[Session, Depends(get_session)],
):
    member, error = member_service.update_member(session, caller, member_id, payload)
    if error is not None:
        return error_response(error)
    return success_response(MemberRead.model_validate(member))


@router.delete("/{member_id}")
def delete_member(
    member_id: str,
    _: Annotated[AuthSession, Depends(require_permission(Permission.DELETE_MEMBER))],
    session: Annotated[Session, Depends(get_session)],
):
    error = member_service.delete_member(session, member_id)
    if error is not None:
        return error_response(error)
    return success_response({"id": member_id, "deleted": True})
