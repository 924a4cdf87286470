from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import pytest
from fastapi import FastAPI
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.types import Message, Receive, Scope, Send

from clubhouse.core.config import get_settings
from clubhouse.core.constants import AdminRole
from clubhouse.core.security import hash_password
from clubhouse.db.session import build_engine, get_session
from clubhouse.main import create_app
from clubhouse.services.auth_service import create_admin_account

ADMIN_PASSWORD = "Admin-pass1!"
MEMBER_PASSWORD = "Member-pass1!"

ApiCall = Callable[..., tuple[int, dict[str, Any]]]


def _request(
    app: FastAPI,
    method: str,
    path: str,
    *,
    json_body: dict[str, Any] | None = None,
    token: str | None = None,
    query: dict[str, Any] | None = None,
) -> tuple[int, dict[str, Any]]:
    headers: list[tuple[bytes, bytes]] = [(b"host", b"testserver")]
    request_body = b""

    if token is not None:
        headers.append((b"authorization", f"Bearer {token}".encode("utf-8")))

    if json_body is not None:
        request_body = json.dumps(json_body).encode("utf-8")
        headers.extend(
            [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(request_body)).encode("utf-8")),
            ]
        )
    else:
        headers.append((b"content-length", b"0"))

    scope: Scope = {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": method.upper(),
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": urlencode(query or {}).encode("utf-8"),
        "headers": headers,
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "root_path": "",
    }

    sent = False

    async def receive() -> Message:
        nonlocal sent
        if sent:
            return {"type": "http.request", "body": b"", "more_body": False}
        sent = True
        return {"type": "http.request", "body": request_body, "more_body": False}

    messages: list[Message] = []

    async def send(message: Message) -> None:
        messages.append(message)

    receive_fn: Receive = receive
    send_fn: Send = send
    asyncio.run(app(scope, receive_fn, send_fn))

    status_code = 500
    body = b""
    for message in messages:
        if message["type"] == "http.response.start":
            status_code = message["status"]
        if message["type"] == "http.response.body":
            body += message.get("body", b"")

    return status_code, json.loads(body) if body else {}


@pytest.fixture(autouse=True)
def settings(monkeypatch: pytest.MonkeyPatch):
    current = get_settings()
    monkeypatch.setattr(current, "password_hash_rounds", 4)
    monkeypatch.setattr(current, "active_members_max", 200)
    monkeypatch.setattr(current, "waitlist_max", 100)
    monkeypatch.setattr(current, "session_ttl_hours", 24)
    return current


@pytest.fixture
def app_and_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    app = create_app()

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    return app, engine


@pytest.fixture
def file_engine(tmp_path):
    """A file database where every thread gets its own connection."""

    engine = build_engine(f"sqlite:///{tmp_path / 'clubhouse.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def api(app_and_engine) -> ApiCall:
    app, _ = app_and_engine

    def call(method: str, path: str, **kwargs: Any) -> tuple[int, dict[str, Any]]:
        return _request(app, method, path, **kwargs)

    return call


@pytest.fixture
def login(api: ApiCall) -> Callable[[str, str], str]:
    def _login(email: str, password: str) -> str:
        status_code, body = api(
            "POST",
            "/api/v1/auth/login",
            json_body={"email": email, "password": password},
        )
        assert status_code == 200, body
        return body["data"]["token"]

    return _login


@pytest.fixture
def make_admin(app_and_engine, login) -> Callable[..., str]:
    """Seed an admin account and return a bearer token for it."""

    _, engine = app_and_engine

    def _make_admin(
        email: str = "root@example.com",
        admin_role: AdminRole = AdminRole.SUPER_ADMIN,
    ) -> str:
        with Session(engine) as session:
            create_admin_account(
                session,
                email=email,
                password_hash=hash_password(ADMIN_PASSWORD),
                first_name="Ada",
                last_name="Admin",
                admin_role=admin_role,
            )
        return login(email, ADMIN_PASSWORD)

    return _make_admin


@pytest.fixture
def register(api: ApiCall) -> Callable[..., tuple[int, dict[str, Any]]]:
    def _register(email: str, **overrides: Any) -> tuple[int, dict[str, Any]]:
        payload = {
            "email": email,
            "password": MEMBER_PASSWORD,
            "confirmPassword": MEMBER_PASSWORD,
            "firstName": "Grace",
            "lastName": "Hopper",
            **overrides,
        }
        return api("POST", "/api/v1/auth/register", json_body=payload)

    return _register
