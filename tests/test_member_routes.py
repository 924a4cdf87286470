from __future__ import annotations

import pytest

from clubhouse.core.constants import AdminRole

MEMBER_PASSWORD = "Member-pass1!"


def _create_member(api, token: str, email: str, **overrides) -> dict:
    payload = {"email": email, "firstName": "Linus", "lastName": email.split("@")[0], **overrides}
    status_code, body = api("POST", "/api/v1/members", json_body=payload, token=token)
    assert status_code == 201, body
    return body["data"]


def test_list_members_requires_authentication(api):
    status_code, body = api("GET", "/api/v1/members")

    assert status_code == 401
    assert body["error"]["code"] == "unauthorized"


def test_list_members_forbidden_without_view_permission(api, register):
    _, registered = register("grace@example.com")

    status_code, body = api("GET", "/api/v1/members", token=registered["data"]["token"])

    assert status_code == 403
    assert body["error"]["code"] == "forbidden"


def test_admin_creates_member_with_defaults(api, make_admin):
    token = make_admin()

    member = _create_member(
        api,
        token,
        "linus@example.com",
        phone="555-0100",
        address={
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62701",
            "country": "US",
        },
        preferences={"isPublicProfile": True},
    )

    assert member["status"] == "active"
    assert member["membershipId"].startswith("MEM-")
    assert len(member["membershipId"]) == len("MEM-") + 6
    assert member["address"]["zipCode"] == "62701"
    assert member["preferences"] == {
        "receiveEmails": True,
        "receiveNotifications": True,
        "isPublicProfile": True,
    }
    assert member["lastLogin"] is None


@pytest.mark.parametrize(
    ("payload", "expected_code"),
    [
        ({"email": "linus@example.com", "firstName": "Linus"}, "invalid_request"),
        ({"email": "linus-at-example", "firstName": "Linus", "lastName": "T"}, "invalid_email"),
    ],
)
def test_create_member_validation(api, make_admin, payload, expected_code):
    token = make_admin()

    status_code, body = api("POST", "/api/v1/members", json_body=payload, token=token)

    assert status_code == 400
    assert body["error"]["code"] == expected_code


def test_create_member_rejects_bad_profile_picture(api, make_admin):
    token = make_admin()

    status_code, body = api(
        "POST",
        "/api/v1/members",
        json_body={
            "email": "linus@example.com",
            "firstName": "Linus",
            "lastName": "T",
            "profilePicture": "javascript:alert(1)",
        },
        token=token,
    )

    assert status_code == 400
    assert body["error"]["code"] == "invalid_request"


def test_create_member_rejects_email_in_use(api, make_admin, register):
    token = make_admin()
    register("grace@example.com")

    for email in ("grace@example.com", "root@example.com"):
        status_code, body = api(
            "POST",
            "/api/v1/members",
            json_body={"email": email, "firstName": "G", "lastName": "H"},
            token=token,
        )
        assert status_code == 409
        assert body["error"]["code"] == "email_conflict"


def test_create_member_checks_capacity_first(api, make_admin, settings):
    token = make_admin()
    settings.active_members_max = 1
    _create_member(api, token, "first@example.com")

    status_code, body = api("POST", "/api/v1/members", json_body={}, token=token)

    assert status_code == 409
    assert body["error"]["code"] == "max_members_reached"


def test_create_member_forbidden_for_read_only_admin(api, make_admin):
    token = make_admin("support@example.com", AdminRole.SUPPORT_ADMIN)

    status_code, body = api(
        "POST",
        "/api/v1/members",
        json_body={"email": "linus@example.com", "firstName": "L", "lastName": "T"},
        token=token,
    )

    assert status_code == 403
    assert body["error"]["code"] == "forbidden"


def test_list_members_paginates_filters_and_sorts(api, make_admin):
    token = make_admin()
    for email in ("carol@example.com", "alice@example.com", "bob@example.com"):
        _create_member(api, token, email)

    status_code, body = api("GET", "/api/v1/members", token=token, query={"limit": 2})
    assert status_code == 200
    assert len(body["data"]["members"]) == 2
    assert body["data"]["total"] == 3
    assert body["data"]["limit"] == 2
    assert body["data"]["offset"] == 0
    assert body["meta"] == {"page": 1, "limit": 2, "total": 3}

    status_code, body = api("GET", "/api/v1/members", token=token, query={"limit": 2, "page": 2})
    assert status_code == 200
    assert len(body["data"]["members"]) == 1
    assert body["data"]["offset"] == 2
    assert body["meta"]["page"] == 2

    status_code, body = api("GET", "/api/v1/members", token=token, query={"sort": "-email"})
    assert [member["email"] for member in body["data"]["members"]] == [
        "carol@example.com",
        "bob@example.com",
        "alice@example.com",
    ]

    alice = next(m for m in body["data"]["members"] if m["email"] == "alice@example.com")
    api("PATCH", f"/api/v1/members/{alice['id']}", json_body={"status": "suspended"}, token=token)

    status_code, body = api("GET", "/api/v1/members", token=token, query={"status": "suspended"})
    assert status_code == 200
    assert body["data"]["total"] == 1
    assert body["data"]["members"][0]["email"] == "alice@example.com"


def test_list_members_rejects_unknown_sort_field(api, make_admin):
    token = make_admin()

    status_code, body = api("GET", "/api/v1/members", token=token, query={"sort": "password"})

    assert status_code == 400
    assert body["error"]["code"] == "invalid_sort"
    assert "email" in body["error"]["details"]["allowed"]


def test_get_member_not_found(api, make_admin):
    token = make_admin()

    status_code, body = api("GET", "/api/v1/members/missing", token=token)

    assert status_code == 404
    assert body["error"]["code"] == "not_found"


def test_member_self_update_is_limited_to_profile_fields(api, register):
    _, registered = register("grace@example.com")
    token = registered["data"]["token"]
    member_id = registered["data"]["user"]["id"]

    status_code, body = api(
        "PATCH",
        f"/api/v1/members/{member_id}",
        json_body={
            "firstName": "Amazing",
            "bio": "Compiler pioneer",
            "email": "other@example.com",
            "status": "suspended",
            "preferences": {"receiveEmails": False},
        },
        token=token,
    )

    assert status_code == 200
    assert body["data"]["firstName"] == "Amazing"
    assert body["data"]["bio"] == "Compiler pioneer"
    assert body["data"]["email"] == "grace@example.com"
    assert body["data"]["status"] == "active"
    assert body["data"]["preferences"] == {
        "receiveEmails": False,
        "receiveNotifications": True,
        "isPublicProfile": False,
    }


def test_member_cannot_view_or_update_another_member(api, register):
    _, first = register("grace@example.com")
    _, second = register("ada@example.com")
    other_id = second["data"]["user"]["id"]
    token = first["data"]["token"]

    status_code, _ = api("GET", f"/api/v1/members/{other_id}", token=token)
    assert status_code == 403

    status_code, body = api(
        "PATCH",
        f"/api/v1/members/{other_id}",
        json_body={"firstName": "Mallory"},
        token=token,
    )
    assert status_code == 403
    assert body["error"]["code"] == "forbidden"


def test_admin_email_change_moves_login(api, make_admin, register, login):
    token = make_admin()
    _, registered = register("grace@example.com")
    member_id = registered["data"]["user"]["id"]

    status_code, body = api(
        "PATCH",
        f"/api/v1/members/{member_id}",
        json_body={"email": "grace.hopper@example.com"},
        token=token,
    )

    assert status_code == 200
    assert body["data"]["email"] == "grace.hopper@example.com"
    assert login("grace.hopper@example.com", MEMBER_PASSWORD)


def test_admin_email_change_rejects_taken_email(api, make_admin, register):
    token = make_admin()
    _, registered = register("grace@example.com")
    register("ada@example.com")

    status_code, body = api(
        "PATCH",
        f"/api/v1/members/{registered['data']['user']['id']}",
        json_body={"email": "ada@example.com"},
        token=token,
    )

    assert status_code == 409
    assert body["error"]["code"] == "email_conflict"


def test_reactivation_respects_member_capacity(api, make_admin, settings):
    token = make_admin()
    settings.active_members_max = 1
    first = _create_member(api, token, "first@example.com")

    status_code, _ = api(
        "PATCH",
        f"/api/v1/members/{first['id']}",
        json_body={"status": "inactive"},
        token=token,
    )
    assert status_code == 200
    _create_member(api, token, "second@example.com")

    status_code, body = api(
        "PATCH",
        f"/api/v1/members/{first['id']}",
        json_body={"status": "active"},
        token=token,
    )

    assert status_code == 409
    assert body["error"]["code"] == "max_members_reached"


def test_delete_member_removes_record_login_and_sessions(api, make_admin, register):
    token = make_admin()
    _, registered = register("grace@example.com")
    member_id = registered["data"]["user"]["id"]
    member_token = registered["data"]["token"]

    status_code, body = api("DELETE", f"/api/v1/members/{member_id}", token=token)

    assert status_code == 200
    assert body["data"] == {"id": member_id, "deleted": True}

    status_code, _ = api("GET", f"/api/v1/members/{member_id}", token=token)
    assert status_code == 404

    status_code, _ = api("GET", f"/api/v1/members/{member_id}", token=member_token)
    assert status_code == 401

    status_code, body = api(
        "POST",
        "/api/v1/auth/login",
        json_body={"email": "grace@example.com", "password": MEMBER_PASSWORD},
    )
    assert status_code == 401

    status_code, _ = register("grace@example.com")
    assert status_code == 201


def test_delete_member_requires_delete_permission(api, make_admin, register):
    token = make_admin("content@example.com", AdminRole.CONTENT_ADMIN)
    _, registered = register("grace@example.com")

    status_code, body = api(
        "DELETE",
        f"/api/v1/members/{registered['data']['user']['id']}",
        token=token,
    )

    assert status_code == 403
    assert body["error"]["code"] == "forbidden"
