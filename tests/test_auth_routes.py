from ems.models import UserStatus

from conftest import PASSWORD, SUPERADMIN_EMAIL


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_login_returns_token_pair(client, users):
    r = client.post("/api/auth/login", json={"email": "attendee@ems.com", "password": PASSWORD})

    assert r.status_code == 200
    data = r.get_json()
    assert set(data) == {"accessToken", "refreshToken", "tokenType", "expiresIn", "user"}
    assert data["tokenType"] == "Bearer"
    assert data["expiresIn"] == 2700
    assert data["user"]["email"] == "attendee@ems.com"
    assert data["user"]["role"] == "Attendee"


def test_login_failures_are_byte_identical(client, create_user, users):
    create_user("held@ems.com", status=UserStatus.HELD)

    unknown = client.post("/api/auth/login", json={"email": "ghost@ems.com", "password": PASSWORD})
    wrong = client.post("/api/auth/login", json={"email": "attendee@ems.com", "password": "nope"})
    held = client.post("/api/auth/login", json={"email": "held@ems.com", "password": PASSWORD})

    assert unknown.status_code == wrong.status_code == held.status_code == 401
    assert unknown.data == wrong.data == held.data
    assert unknown.get_json()["code"] == "INVALID_CREDENTIALS"


def test_login_validation_errors(client):
    missing = client.post("/api/auth/login", json={"email": "attendee@ems.com"})
    assert missing.status_code == 400
    assert missing.get_json()["code"] == "VALIDATION_ERROR"
    assert "password" in missing.get_json()["details"]

    bad_email = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert bad_email.status_code == 400

    not_json = client.post("/api/auth/login", data="email=a", content_type="text/plain")
    assert not_json.status_code == 400
    assert not_json.get_json()["code"] == "VALIDATION_ERROR"


def test_login_use_logout_then_rejected(client, login, users):
    tokens = login("attendee@ems.com")

    me = client.get("/api/auth/me", headers=bearer(tokens["accessToken"]))
    assert me.status_code == 200
    assert me.get_json()["id"] == users["attendee"]
    assert "ROLE_Attendee" in me.get_json()["authorities"]

    out = client.post("/api/auth/logout", headers=bearer(tokens["accessToken"]))
    assert out.status_code == 200

    after = client.get("/api/auth/me", headers=bearer(tokens["accessToken"]))
    assert after.status_code == 401
    # the revoked token no longer resolves, so it cannot be logged out twice
    again = client.post("/api/auth/logout", headers=bearer(tokens["accessToken"]))
    assert again.status_code == 401
    assert again.get_json()["code"] == "INVALID_TOKEN"


def test_logout_rejects_refresh_token(client, login, users):
    tokens = login("attendee@ems.com")
    r = client.post("/api/auth/logout", headers=bearer(tokens["refreshToken"]))
    assert r.status_code == 401
    assert r.get_json()["code"] == "INVALID_TOKEN"


def test_logout_requires_bearer_token(client):
    r = client.post("/api/auth/logout")
    assert r.status_code == 401
    assert r.get_json()["code"] == "AUTHENTICATION_REQUIRED"


def test_refresh_yields_working_access_token(client, login, users):
    tokens = login("attendee@ems.com")

    r = client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert r.status_code == 200
    refreshed = r.get_json()
    assert refreshed["refreshToken"] == tokens["refreshToken"]
    assert refreshed["accessToken"] != tokens["accessToken"]

    assert client.get("/api/auth/me", headers=bearer(refreshed["accessToken"])).status_code == 200
    assert client.get("/api/auth/me", headers=bearer(tokens["accessToken"])).status_code == 200


def test_refresh_rejects_access_token(client, login, users):
    tokens = login("attendee@ems.com")

    r = client.post("/api/auth/refresh", json={"refreshToken": tokens["accessToken"]})
    assert r.status_code == 401
    assert r.get_json()["code"] == "INVALID_TOKEN"


def test_refresh_token_is_not_accepted_as_bearer(client, login, users):
    tokens = login("attendee@ems.com")
    assert client.get("/api/auth/me", headers=bearer(tokens["refreshToken"])).status_code == 401


def test_refresh_requires_field(client):
    r = client.post("/api/auth/refresh", json={})
    assert r.status_code == 400
    assert r.get_json()["code"] == "VALIDATION_ERROR"


def test_logout_all_revokes_every_session(client, login, users):
    first = login("attendee@ems.com")
    second = login("attendee@ems.com")

    r = client.post("/api/auth/logout-all", headers=bearer(first["accessToken"]))
    assert r.status_code == 200
    assert r.get_json()["revoked"] == 4

    assert client.get("/api/auth/me", headers=bearer(second["accessToken"])).status_code == 401
    refresh = client.post("/api/auth/refresh", json={"refreshToken": second["refreshToken"]})
    assert refresh.status_code == 401


def test_logout_all_requires_authentication(client):
    assert client.post("/api/auth/logout-all").status_code == 401


def test_superadmin_has_every_permission(client, login):
    tokens = login(SUPERADMIN_EMAIL)
    me = client.get("/api/auth/me", headers=bearer(tokens["accessToken"])).get_json()

    assert me["role"] == "SuperAdmin"
    assert "role.manage.all" in me["authorities"]
    assert "event.manage.all" in me["authorities"]


def change_password(client, token, old=PASSWORD, new="n3w-secret", confirm=None):
    return client.post(
        "/api/auth/change-password",
        json={"oldPassword": old, "newPassword": new, "confirmPassword": confirm or new},
        headers=bearer(token),
    )


def test_change_password_then_log_in_again(client, login, users):
    tokens = login("attendee@ems.com")

    r = change_password(client, tokens["accessToken"])
    assert r.status_code == 200
    assert r.get_json()["revoked"] == 2

    assert client.get("/api/auth/me", headers=bearer(tokens["accessToken"])).status_code == 401
    refresh = client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert refresh.status_code == 401

    old = client.post("/api/auth/login", json={"email": "attendee@ems.com", "password": PASSWORD})
    assert old.status_code == 401
    fresh = login("attendee@ems.com", "n3w-secret")
    assert client.get("/api/auth/me", headers=bearer(fresh["accessToken"])).status_code == 200


def test_change_password_wrong_current_password(client, login, users):
    tokens = login("attendee@ems.com")

    r = change_password(client, tokens["accessToken"], old="guess-again")
    assert r.status_code == 401
    assert r.get_json()["code"] == "INVALID_CREDENTIALS"
    assert client.get("/api/auth/me", headers=bearer(tokens["accessToken"])).status_code == 200


def test_change_password_confirmation_must_match(client, login, users):
    tokens = login("attendee@ems.com")

    r = change_password(client, tokens["accessToken"], confirm="something-else")
    assert r.status_code == 400
    assert r.get_json()["code"] == "VALIDATION_ERROR"
    assert client.get("/api/auth/me", headers=bearer(tokens["accessToken"])).status_code == 200


def test_change_password_field_rules(client, login, users):
    tokens = login("attendee@ems.com")

    short = change_password(client, tokens["accessToken"], new="abc12")
    assert short.status_code == 400

    missing = client.post(
        "/api/auth/change-password",
        json={"newPassword": "n3w-secret", "confirmPassword": "n3w-secret"},
        headers=bearer(tokens["accessToken"]),
    )
    assert missing.status_code == 400
    assert missing.get_json()["code"] == "VALIDATION_ERROR"


def test_change_password_requires_authentication(client, users):
    r = client.post(
        "/api/auth/change-password",
        json={"oldPassword": PASSWORD, "newPassword": "n3w-secret", "confirmPassword": "n3w-secret"},
    )
    assert r.status_code == 401
    assert r.get_json()["code"] == "AUTHENTICATION_REQUIRED"
