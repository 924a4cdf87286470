"""Bearer token dependencies shared by the API routers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from clubhouse.core.constants import Permission
from clubhouse.core.errors import ApiError, forbidden, unauthorized
from clubhouse.db.session import get_session
from clubhouse.models.auth_session import AuthSession
from clubhouse.services import session_service
from clubhouse.services.authorization import has_permission


def get_bearer_token(request: Request) -> str | None:
    """Return the bearer token from the ``Authorization`` header, if well formed."""

    return session_service.parse_bearer_token(request.headers.get("Authorization"))


def require_auth_session(
    token: Annotated[str | None, Depends(get_bearer_token)],
    session: Annotated[Session, Depends(get_session)],
) -> AuthSession:
    """Return the caller's live session or stop with 401."""

    if token is None:
        raise ApiError(unauthorized("unauthorized", "Authentication required"))
    auth_session = session_service.get_active_session(session, token)
    if auth_session is None:
        raise ApiError(unauthorized("session_expired", "Session expired or invalid"))
    return auth_session


def require_permission(permission: Permission) -> Callable[[AuthSession], AuthSession]:
    """Build a dependency that stops with 403 unless the session holds ``permission``."""

    def dependency(
        auth_session: Annotated[AuthSession, Depends(require_auth_session)],
    ) -> AuthSession:
        if not has_permission(auth_session, permission):
            raise ApiError(forbidden(f"Missing permission: {permission}"))
        return auth_session

    return dependency
