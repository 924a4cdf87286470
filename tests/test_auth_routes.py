from __future__ import annotations

from datetime import timedelta

import pytest
from sqlmodel import Session, select

from clubhouse.core.constants import AdminRole, Permission, utcnow
from clubhouse.models.admin_user import AdminUser
from clubhouse.models.auth_session import AuthSession
from clubhouse.services import auth_service

ADMIN_PASSWORD = "Admin-pass1!"
MEMBER_PASSWORD = "Member-pass1!"


def test_health_reports_ok(api):
    status_code, body = api("GET", "/api/v1/health")

    assert status_code == 200
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["data"]["status"] == "ok"
    assert "timestamp" in body


def test_register_creates_active_member_with_session(api, register):
    status_code, body = register("grace@example.com")

    assert status_code == 201
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["role"] == "member"
    assert user["email"] == "grace@example.com"
    assert user["firstName"] == "Grace"
    assert body["data"]["token"]
    assert body["data"]["expiresAt"]

    status_code, body = api(
        "GET",
        f"/api/v1/members/{user['id']}",
        token=body["data"]["token"],
    )

    assert status_code == 200
    assert body["data"]["status"] == "active"
    assert body["data"]["membershipId"].startswith("MEM-")
    assert body["data"]["preferences"] == {
        "receiveEmails": True,
        "receiveNotifications": True,
        "isPublicProfile": False,
    }


def test_register_joins_waitlist_when_members_are_full(api, register, settings):
    settings.active_members_max = 1

    status_code, first = register("first@example.com")
    assert status_code == 201
    assert first["data"]["user"]["role"] == "member"

    status_code, second = register("second@example.com", reasonForJoining="Friends are here")
    assert status_code == 201
    user = second["data"]["user"]
    assert user["role"] == "waitlist"

    status_code, body = api(
        "GET",
        f"/api/v1/waitlist/{user['id']}",
        token=second["data"]["token"],
    )

    assert status_code == 200
    assert body["data"]["status"] == "pending"
    assert body["data"]["position"] == 1
    assert body["data"]["reasonForJoining"] == "Friends are here"


def test_register_is_closed_when_members_and_waitlist_are_full(register, settings):
    settings.active_members_max = 0
    settings.waitlist_max = 0

    status_code, body = register("late@example.com")

    assert status_code == 409
    assert body["success"] is False
    assert body["error"]["code"] == "registration_closed"


@pytest.mark.parametrize(
    ("email", "overrides", "expected_code"),
    [
        ("grace@example.com", {"lastName": None}, "invalid_request"),
        ("grace@example.com", {"firstName": "   "}, "invalid_request"),
        ("not-an-email", {}, "invalid_email"),
        ("not-an-email", {"confirmPassword": "Other-pass1!"}, "invalid_email"),
        ("grace@example.com", {"confirmPassword": "Other-pass1!"}, "password_mismatch"),
        ("grace@example.com", {"password": "weak", "confirmPassword": "weak"}, "invalid_password"),
    ],
)
def test_register_validation_errors(register, email, overrides, expected_code):
    status_code, body = register(email, **overrides)

    assert status_code == 400
    assert body["error"]["code"] == expected_code


def test_register_reports_every_password_rule(register):
    status_code, body = register("grace@example.com", password="abc", confirmPassword="abc")

    assert status_code == 400
    assert body["error"]["code"] == "invalid_password"
    assert len(body["error"]["details"]["errors"]) == 4


def test_register_rejects_password_longer_than_bcrypt_accepts(register):
    long_password = MEMBER_PASSWORD + "x" * 70

    status_code, body = register(
        "grace@example.com",
        password=long_password,
        confirmPassword=long_password,
    )

    assert status_code == 400
    assert body["error"]["code"] == "invalid_password"
    assert body["error"]["details"]["errors"] == ["Password must be at most 72 bytes long"]


def test_register_rejects_duplicate_email(register):
    register("grace@example.com")

    status_code, body = register("grace@example.com")

    assert status_code == 409
    assert body["error"]["code"] == "email_conflict"


def test_malformed_payload_is_rejected_with_envelope(api):
    status_code, body = api("POST", "/api/v1/auth/register", json_body={"email": 42})

    assert status_code == 400
    assert body["success"] is False
    assert body["error"]["code"] == "invalid_request"
    assert body["error"]["details"]["errors"]


def test_login_returns_session_for_valid_credentials(api, register):
    register("grace@example.com")

    status_code, body = api(
        "POST",
        "/api/v1/auth/login",
        json_body={"email": "grace@example.com", "password": MEMBER_PASSWORD},
    )

    assert status_code == 200
    assert body["data"]["user"]["role"] == "member"
    assert body["data"]["user"]["lastName"] == "Hopper"
    assert body["data"]["token"]


@pytest.mark.parametrize(
    "credentials",
    [
        {"email": "grace@example.com", "password": "Wrong-pass1!"},
        {"email": "nobody@example.com", "password": MEMBER_PASSWORD},
    ],
)
def test_login_rejects_bad_credentials_with_same_error(api, register, credentials):
    register("grace@example.com")

    status_code, body = api("POST", "/api/v1/auth/login", json_body=credentials)

    assert status_code == 401
    assert body["error"]["code"] == "invalid_credentials"
    assert body["error"]["message"] == "Invalid email or password"


def test_login_requires_email_and_password(api):
    status_code, body = api("POST", "/api/v1/auth/login", json_body={"email": "a@example.com"})

    assert status_code == 400
    assert body["error"]["code"] == "invalid_request"


def test_register_admin_requires_authentication(api):
    status_code, body = api("POST", "/api/v1/auth/register-admin", json_body={})

    assert status_code == 401
    assert body["error"]["code"] == "unauthorized"


def test_register_admin_forbidden_for_members_and_non_super_admins(api, register, make_admin):
    _, member = register("grace@example.com")
    membership_admin_token = make_admin("ops@example.com", AdminRole.MEMBERSHIP_ADMIN)
    payload = {
        "email": "new-admin@example.com",
        "password": ADMIN_PASSWORD,
        "confirmPassword": ADMIN_PASSWORD,
        "firstName": "New",
        "lastName": "Admin",
        "adminRole": "support_admin",
    }

    for token in (member["data"]["token"], membership_admin_token):
        status_code, body = api(
            "POST",
            "/api/v1/auth/register-admin",
            json_body=payload,
            token=token,
        )
        assert status_code == 403
        assert body["error"]["code"] == "forbidden"


def test_super_admin_registers_admin_who_can_log_in(api, make_admin, login):
    token = make_admin()

    status_code, body = api(
        "POST",
        "/api/v1/auth/register-admin",
        json_body={
            "email": "ops@example.com",
            "password": ADMIN_PASSWORD,
            "confirmPassword": ADMIN_PASSWORD,
            "firstName": "Olive",
            "lastName": "Ops",
            "adminRole": "membership_admin",
        },
        token=token,
    )

    assert status_code == 201
    assert body["data"]["role"] == "admin"
    assert body["data"]["adminRole"] == "membership_admin"
    assert body["data"]["created"] is True
    assert "token" not in body["data"]

    ops_token = login("ops@example.com", ADMIN_PASSWORD)
    status_code, _ = api("GET", "/api/v1/members", token=ops_token)
    assert status_code == 200


def test_register_admin_rejects_unknown_role(api, make_admin):
    token = make_admin()

    status_code, body = api(
        "POST",
        "/api/v1/auth/register-admin",
        json_body={
            "email": "ops@example.com",
            "password": ADMIN_PASSWORD,
            "confirmPassword": ADMIN_PASSWORD,
            "firstName": "Olive",
            "lastName": "Ops",
            "adminRole": "owner",
        },
        token=token,
    )

    assert status_code == 400
    assert body["error"]["code"] == "invalid_role"


def test_register_admin_rejects_password_longer_than_bcrypt_accepts(api, make_admin):
    token = make_admin()
    long_password = ADMIN_PASSWORD + "é" * 40

    status_code, body = api(
        "POST",
        "/api/v1/auth/register-admin",
        json_body={
            "email": "ops@example.com",
            "password": long_password,
            "confirmPassword": long_password,
            "firstName": "Olive",
            "lastName": "Ops",
            "adminRole": "membership_admin",
        },
        token=token,
    )

    assert status_code == 400
    assert body["error"]["code"] == "invalid_password"


def test_admin_login_and_refresh_use_stored_permissions(api, app_and_engine, make_admin, login):
    _, engine = app_and_engine
    make_admin("ops@example.com", AdminRole.MEMBERSHIP_ADMIN)

    with Session(engine) as session:
        admin_user = session.exec(select(AdminUser).where(AdminUser.email == "ops@example.com")).one()
        admin_user.permissions = [str(Permission.VIEW_MEMBERS)]
        session.add(admin_user)
        session.commit()

    token = login("ops@example.com", ADMIN_PASSWORD)
    with Session(engine) as session:
        assert session.get(AuthSession, token).permissions == ["view_members"]

    new_member = {"email": "linus@example.com", "firstName": "Linus", "lastName": "T"}
    status_code, _ = api("GET", "/api/v1/members", token=token)
    assert status_code == 200
    status_code, body = api("POST", "/api/v1/members", json_body=new_member, token=token)
    assert status_code == 403
    assert body["error"]["code"] == "forbidden"

    status_code, body = api("POST", "/api/v1/auth/refresh", token=token)
    assert status_code == 200
    refreshed = body["data"]["token"]
    with Session(engine) as session:
        assert session.get(AuthSession, refreshed).permissions == ["view_members"]

    status_code, _ = api("GET", "/api/v1/members", token=refreshed)
    assert status_code == 200
    status_code, _ = api("POST", "/api/v1/members", json_body=new_member, token=refreshed)
    assert status_code == 403


def test_refresh_replaces_token(api, register):
    _, registered = register("grace@example.com")
    old_token = registered["data"]["token"]
    member_id = registered["data"]["user"]["id"]

    status_code, body = api("POST", "/api/v1/auth/refresh", token=old_token)

    assert status_code == 200
    new_token = body["data"]["token"]
    assert new_token != old_token
    assert body["data"]["user"]["id"] == member_id
    assert body["data"]["user"]["firstName"] == "Grace"

    status_code, body = api("GET", f"/api/v1/members/{member_id}", token=old_token)
    assert status_code == 401
    assert body["error"]["code"] == "session_expired"

    status_code, _ = api("GET", f"/api/v1/members/{member_id}", token=new_token)
    assert status_code == 200


def test_refresh_without_token_is_unauthorized(api):
    status_code, body = api("POST", "/api/v1/auth/refresh")

    assert status_code == 401
    assert body["error"]["code"] == "invalid_token"


def test_refresh_with_unknown_token_reports_expired_session(api):
    status_code, body = api("POST", "/api/v1/auth/refresh", token="stale-token")

    assert status_code == 401
    assert body["error"]["code"] == "session_expired"


def test_logout_is_idempotent(api, register):
    _, registered = register("grace@example.com")
    token = registered["data"]["token"]
    member_id = registered["data"]["user"]["id"]

    status_code, body = api("POST", "/api/v1/auth/logout", token=token)
    assert status_code == 200
    assert body["data"] == {"loggedOut": True, "sessionTerminated": True}

    status_code, body = api("POST", "/api/v1/auth/logout", token=token)
    assert status_code == 200
    assert body["data"] == {"loggedOut": True, "sessionTerminated": False}

    status_code, _ = api("GET", f"/api/v1/members/{member_id}", token=token)
    assert status_code == 401


def test_logout_without_token_is_unauthorized(api):
    status_code, body = api("POST", "/api/v1/auth/logout")

    assert status_code == 401
    assert body["error"]["code"] == "invalid_token"


def test_expired_session_is_rejected_and_purged(api, app_and_engine, register):
    _, engine = app_and_engine
    _, registered = register("grace@example.com")
    token = registered["data"]["token"]
    member_id = registered["data"]["user"]["id"]

    with Session(engine) as session:
        auth_session = session.get(AuthSession, token)
        assert auth_session is not None
        auth_session.expires_at = utcnow() - timedelta(seconds=1)
        session.add(auth_session)
        session.commit()

    status_code, body = api("GET", f"/api/v1/members/{member_id}", token=token)

    assert status_code == 401
    assert body["error"]["code"] == "session_expired"
    with Session(engine) as session:
        assert session.exec(select(AuthSession).where(AuthSession.token == token)).first() is None


def test_unexpected_errors_use_error_envelope(api, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(auth_service, "login", explode)

    status_code, body = api(
        "POST",
        "/api/v1/auth/login",
        json_body={"email": "grace@example.com", "password": MEMBER_PASSWORD},
    )

    assert status_code == 500
    assert body["success"] is False
    assert body["error"]["code"] == "internal_error"
