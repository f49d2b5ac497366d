from datetime import timedelta

import pytest

from utils.security import utcnow

from conftest import ALICE, bearer


def test_session_lifecycle_end_to_end(client, register):
    res = register()
    assert res.status_code == 201
    body = res.get_json()
    assert body["message"]
    assert body["user"]["username"] == "alice"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]
    assert body["accessToken"] and body["refreshToken"]

    res = register(username="alice2")
    assert res.status_code == 409
    assert res.get_json()["message"] == "username or email already exists"

    res = client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "invalid email or password"

    res = client.post("/auth/login", json={"email": "a@x.com", "password": "secret12"})
    assert res.status_code == 200
    login = res.get_json()
    assert login["refreshToken"] != body["refreshToken"]
    assert "password" not in login["user"]

    res = client.post("/auth/refresh", json={"refreshToken": login["refreshToken"]})
    assert res.status_code == 200
    refreshed = res.get_json()
    assert refreshed["message"]
    assert refreshed["accessToken"] != login["accessToken"]
    assert "refreshToken" not in refreshed

    res = client.post(
        "/auth/logout",
        json={"refreshToken": login["refreshToken"]},
        headers=bearer(refreshed["accessToken"]),
    )
    assert res.status_code == 200
    assert res.get_json() == {"message": "logged out"}

    res = client.post("/auth/refresh", json={"refreshToken": login["refreshToken"]})
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_OR_EXPIRED_TOKEN"

    # The registration session was never logged out
    res = client.post("/auth/refresh", json={"refreshToken": body["refreshToken"]})
    assert res.status_code == 200


def test_login_unknown_email_matches_wrong_password(client, alice):
    unknown = client.post("/auth/login", json={"email": "zed@x.com", "password": "secret12"})
    wrong = client.post("/auth/login", json={"email": ALICE["email"], "password": "nope"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()


def test_register_validation_errors(register):
    res = register(password=None)
    assert res.status_code == 400
    assert res.get_json()["message"] == "username, email, and password are required"

    res = register(email="not-an-email")
    assert res.status_code == 400
    assert res.get_json()["message"] == "invalid email format"


def test_register_accepts_profile_fields(register):
    res = register(firstName="Alice", lastName="Liddell")
    assert res.status_code == 201
    user = res.get_json()["user"]
    assert user["firstName"] == "Alice"
    assert user["lastName"] == "Liddell"


def test_login_requires_fields(client):
    res = client.post("/auth/login", json={"email": "a@x.com"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "VALIDATION_ERROR"


def test_refresh_requires_token(client):
    res = client.post("/auth/refresh", json={})
    assert res.status_code == 400


def test_refresh_with_garbage_token(client):
    res = client.post("/auth/refresh", json={"refreshToken": "garbage"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_TOKEN"


def test_refresh_accepts_snake_case_key(client, alice):
    res = client.post("/auth/refresh", json={"refresh_token": alice["refreshToken"]})
    assert res.status_code == 200


def test_logout_without_token_in_body_still_succeeds(client, alice):
    res = client.post("/auth/logout", json={}, headers=bearer(alice["accessToken"]))
    assert res.status_code == 200
    assert res.get_json()["message"] == "logged out"


def test_protected_route_without_bearer(client, alice):
    res = client.post("/auth/logout", json={"refreshToken": alice["refreshToken"]})
    assert res.status_code == 401
    body = res.get_json()
    assert body["error"] == "UNAUTHORIZED"
    assert body["message"] == "No token provided"

    res = client.post("/auth/logout", headers={"Authorization": alice["accessToken"]})
    assert res.status_code == 401
    assert res.get_json()["error"] == "UNAUTHORIZED"


def test_expired_access_token_is_reported_separately(client, services, alice):
    user_id = alice["user"]["id"]
    expired = services.issuer.issue_access_token(user_id, "alice", now=utcnow() - timedelta(hours=1))

    res = client.post("/auth/logout", headers=bearer(expired))
    assert res.status_code == 401
    assert res.get_json()["error"] == "TOKEN_EXPIRED"
    assert res.get_json()["message"] == "Token expired"

    res = client.post("/auth/logout", headers=bearer(alice["accessToken"] + "x"))
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_TOKEN"
    assert res.get_json()["message"] == "Invalid token"


def test_refresh_token_is_not_an_access_token(client, alice):
    res = client.post("/auth/logout", headers=bearer(alice["refreshToken"]))
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_TOKEN"


@pytest.mark.parametrize("body", [[1, 2], "tok", 5])
def test_refresh_rejects_non_object_body(client, body):
    res = client.post("/auth/refresh", json=body)
    assert res.status_code == 400
    assert res.get_json()["error"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("body", [[1, 2], "tok", 5, {"refreshToken": {"a": 1}}, {"refreshToken": [1]}])
def test_logout_rejects_malformed_body(client, alice, body):
    res = client.post("/auth/logout", json=body, headers=bearer(alice["accessToken"]))
    assert res.status_code == 400
    assert res.get_json()["error"] == "VALIDATION_ERROR"

    # The session is untouched
    res = client.post("/auth/refresh", json={"refreshToken": alice["refreshToken"]})
    assert res.status_code == 200


def test_refresh_rejects_non_string_token(client):
    res = client.post("/auth/refresh", json={"refreshToken": 12345})
    assert res.status_code == 400
    assert res.get_json()["details"] == {"refreshToken": ["Not a valid string."]}
