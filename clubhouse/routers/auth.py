"""Authentication routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from clubhouse.core.responses import error_response, success_response
from clubhouse.db.session import get_session
from clubhouse.models.auth_session import AuthSession
from clubhouse.routers.dependencies import get_bearer_token, require_auth_session
from clubhouse.schemas.auth import AdminRegistrationInput, LoginInput, RegistrationInput
from clubhouse.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/register")
def register(
    payload: RegistrationInput,
    session: Annotated[Session, Depends(get_session)],
):
    result, error = auth_service.register(session, payload)
    if error is not None:
        return error_response(error)
    return success_response(result, status.HTTP_201_CREATED)


@router.post("/login")
def login(
    payload: LoginInput,
    session: Annotated[Session, Depends(get_session)],
):
    result, error = auth_service.login(session, payload)
    if error is not None:
        return error_response(error)
    return success_response(result)


@router.post("/register-admin")
def register_admin(
    payload: AdminRegistrationInput,
    caller: Annotated[AuthSession, Depends(require_auth_session)],
    session: Annotated[Session, Depends(get_session)],
):
    result, error = auth_service.register_admin(session, caller, payload)
    if error is not None:
        return error_response(error)
    return success_response(result, status.HTTP_201_CREATED)


@router.post("/refresh")
def refresh(
    token: Annotated[str | None, Depends(get_bearer_token)],
    session: Annotated[Session, Depends(get_session)],
):
    result, error = auth_service.refresh(session, token)
    if error is not None:
        return error_response(error)
    return success_response(result)


@router.post("/logout")
def logout(
    token: Annotated[str | None, Depends(get_bearer_token)],
    session: Annotated[Session, Depends(get_session)],
):
    result, error = auth_service.logout(session, token)
    if error is not None:
        return error_response(error)
    return success_response(result)
