import pytest

from conftest import SUPERADMIN_EMAIL


@pytest.fixture
def headers(auth_headers, users):
    return {
        "admin": auth_headers("admin@ems.com"),
        "admin2": auth_headers("admin2@ems.com"),
        "attendee": auth_headers("attendee@ems.com"),
        "attendee2": auth_headers("attendee2@ems.com"),
        "superadmin": auth_headers(SUPERADMIN_EMAIL),
    }


@pytest.fixture
def create_event(client, headers):
    def _create(title="Launch party", visibility="PUBLIC", owner="admin"):
        r = client.post("/api/events", json={"title": title, "visibility": visibility},
                        headers=headers[owner])
        assert r.status_code == 201, r.get_json()
        return r.get_json()["id"]

    return _create


def test_create_event_sets_organizer(client, headers, users):
    r = client.post("/api/events", json={
        "title": "Kickoff",
        "location": "Main hall",
        "startTime": "2030-01-01T10:00:00",
        "endTime": "2030-01-01T12:00:00",
    }, headers=headers["admin"])

    assert r.status_code == 201
    data = r.get_json()
    assert data["organizerId"] == users["admin"]
    assert data["visibility"] == "PUBLIC"


def test_create_event_requires_authentication(client):
    r = client.post("/api/events", json={"title": "Nope"})
    assert r.status_code == 401


def test_create_event_requires_manage_permission(client, headers):
    r = client.post("/api/events", json={"title": "Nope"}, headers=headers["attendee"])
    assert r.status_code == 403
    assert r.get_json()["code"] == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.parametrize("body", [
    {},
    {"title": ""},
    {"title": "x", "visibility": "SECRET"},
    {"title": "x", "startTime": "2030-01-02T00:00:00", "endTime": "2030-01-01T00:00:00"},
])
def test_create_event_validation(client, headers, body):
    r = client.post("/api/events", json=body, headers=headers["admin"])
    assert r.status_code == 400


def test_only_owner_or_manage_all_can_update(client, headers, create_event):
    event_id = create_event(owner="admin")

    other = client.put(f"/api/events/{event_id}", json={"title": "Hijacked"}, headers=headers["admin2"])
    assert other.status_code == 403

    owner = client.put(f"/api/events/{event_id}", json={"title": "Renamed"}, headers=headers["admin"])
    assert owner.status_code == 200
    assert owner.get_json()["title"] == "Renamed"

    root = client.put(f"/api/events/{event_id}", json={"visibility": "PRIVATE"},
                      headers=headers["superadmin"])
    assert root.status_code == 200
    assert root.get_json()["visibility"] == "PRIVATE"


def test_delete_is_ownership_scoped_and_soft(client, headers, create_event):
    event_id = create_event(owner="admin")

    assert client.delete(f"/api/events/{event_id}", headers=headers["admin2"]).status_code == 403
    assert client.delete(f"/api/events/{event_id}", headers=headers["admin"]).status_code == 200
    assert client.get(f"/api/events/{event_id}", headers=headers["admin"]).status_code == 404
    assert client.delete(f"/api/events/{event_id}", headers=headers["admin"]).status_code == 404


def test_unknown_event_is_404(client, headers):
    r = client.get("/api/events/9999", headers=headers["admin"])
    assert r.status_code == 404
    assert r.get_json()["code"] == "NOT_FOUND"


def test_visibility_rules(client, headers, users, create_event):
    public_id = create_event("Public", "PUBLIC")
    private_id = create_event("Private", "PRIVATE")
    invite_id = create_event("Invite only", "INVITE_ONLY")

    r = client.post(f"/api/events/{invite_id}/invitees/{users['attendee']}", headers=headers["admin"])
    assert r.status_code == 200
    assert users["attendee"] in r.get_json()["attendeeIds"]

    assert client.get(f"/api/events/{public_id}", headers=headers["attendee"]).status_code == 200
    assert client.get(f"/api/events/{private_id}", headers=headers["attendee"]).status_code == 403
    assert client.get(f"/api/events/{invite_id}", headers=headers["attendee"]).status_code == 200
    assert client.get(f"/api/events/{invite_id}", headers=headers["attendee2"]).status_code == 403

    def listed(who):
        r = client.get("/api/events", headers=headers[who])
        assert r.status_code == 200
        return {e["id"] for e in r.get_json()["events"]}

    assert listed("attendee") == {public_id, invite_id}
    assert listed("attendee2") == {public_id}
    # event.view.all
    assert listed("admin2") == {public_id, private_id, invite_id}


def test_list_events_requires_authentication(client):
    assert client.get("/api/events").status_code == 401


def test_attend_event(client, headers, users, create_event):
    public_id = create_event("Public", "PUBLIC")
    private_id = create_event("Private", "PRIVATE")

    r = client.post(f"/api/events/{public_id}/attend", headers=headers["attendee"])
    assert r.status_code == 200
    assert users["attendee"] in r.get_json()["attendeeIds"]

    # attending twice is harmless
    again = client.post(f"/api/events/{public_id}/attend", headers=headers["attendee"])
    assert again.get_json()["attendeeIds"].count(users["attendee"]) == 1

    assert client.post(f"/api/events/{private_id}/attend", headers=headers["attendee"]).status_code == 403
    # organizers do not hold event.attend
    assert client.post(f"/api/events/{public_id}/attend", headers=headers["admin"]).status_code == 403


def test_invite_requires_permission_and_ownership(client, headers, users, create_event):
    event_id = create_event("Invite only", "INVITE_ONLY", owner="admin")

    url = f"/api/events/{event_id}/invitees/{users['attendee2']}"
    assert client.post(url, headers=headers["attendee"]).status_code == 403
    assert client.post(url, headers=headers["admin2"]).status_code == 403
    assert client.post(url, headers=headers["admin"]).status_code == 200

    missing = client.post(f"/api/events/{event_id}/invitees/9999", headers=headers["admin"])
    assert missing.status_code == 404
