from greenstride.models.settings import UserSettings
from greenstride.routes import settings_routes


def test_settings_404_until_saved(client, register_and_login):
    alice = register_and_login("alice@x.com")

    assert client.get("/api/settings", headers=alice).status_code == 404


def test_save_creates_then_replaces_document(client, register_and_login):
    alice = register_and_login("alice@x.com")

    resp = client.post(
        "/api/settings",
        json={"theme": "dark", "notifications_enabled": False, "units": "imperial"},
        headers=alice,
    )
    assert resp.status_code == 200

    body = client.get("/api/settings", headers=alice).get_json()
    assert body["theme"] == "dark"
    assert body["notifications_enabled"] is False
    assert body["email_notifications"] is True
    assert body["units"] == "imperial"
    assert body["activity_privacy"] == "public"
    assert body["weekly_goal_steps"] == 70000
    assert body["weekly_goal_distance"] == 50.0

    # a second save is a full replacement, omitted fields fall back to defaults
    client.post("/api/settings", json={"language": "fr"}, headers=alice)
    body = client.get("/api/settings", headers=alice).get_json()
    assert body["theme"] == "light"
    assert body["notifications_enabled"] is True
    assert body["units"] == "metric"
    assert body["language"] == "fr"


def test_invalid_enumerated_values_are_rejected(client, register_and_login):
    alice = register_and_login("alice@x.com")

    assert client.post("/api/settings", json={"theme": "neon"}, headers=alice).status_code == 400
    assert client.post("/api/settings", json={"activity_privacy": "secret"}, headers=alice).status_code == 400
    assert client.post("/api/settings", json={"notifications_enabled": "maybe"}, headers=alice).status_code == 400
    assert client.get("/api/settings", headers=alice).status_code == 404


def test_privacy_can_view(client, register_and_login, make_friends):
    alice = register_and_login("alice@x.com")
    bob = register_and_login("bob@x.com")
    carol = register_and_login("carol@x.com")

    # no settings saved means public
    assert client.get("/api/privacy/can-view/bob@x.com", headers=alice).get_json() == {"canView": True}

    client.post("/api/settings", json={"activity_privacy": "friends"}, headers=bob)
    assert client.get("/api/privacy/can-view/bob@x.com", headers=alice).get_json()["canView"] is False

    make_friends(alice, "alice@x.com", bob, "bob@x.com")
    assert client.get("/api/privacy/can-view/bob@x.com", headers=alice).get_json()["canView"] is True

    client.post("/api/settings", json={"activity_privacy": "private"}, headers=bob)
    assert client.get("/api/privacy/can-view/bob@x.com", headers=alice).get_json()["canView"] is False
    assert client.get("/api/privacy/can-view/bob@x.com", headers=bob).get_json()["canView"] is True

    assert client.get("/api/privacy/can-view/ghost@x.com", headers=carol).status_code == 404


def test_out_of_range_values_are_rejected(client, register_and_login):
    alice = register_and_login("alice@x.com")

    assert client.post("/api/settings", json={"weekly_goal_steps": 1e30}, headers=alice).status_code == 400
    assert client.post("/api/settings", json={"weekly_goal_distance": 3e9}, headers=alice).status_code == 400
    assert client.post("/api/settings", json={"language": "x" * 17}, headers=alice).status_code == 400
    assert client.post("/api/settings", json={"timezone": "x" * 65}, headers=alice).status_code == 400
    assert client.get("/api/settings", headers=alice).status_code == 404

    resp = client.post("/api/settings", json={"language": "x" * 16, "timezone": "x" * 64}, headers=alice)
    assert resp.status_code == 200


def test_save_overwrites_row_created_concurrently(app, client, register_and_login, monkeypatch):
    alice = register_and_login("alice@x.com")
    client.post("/api/settings", json={"theme": "dark"}, headers=alice)

    real_get = settings_routes._get_settings
    calls = []

    def get_after_race(email):
        calls.append(email)
        # the first lookup misses, as if another request inserted meanwhile
        if len(calls) == 1:
            return None
        return real_get(email)

    monkeypatch.setattr(settings_routes, "_get_settings", get_after_race)

    resp = client.post("/api/settings", json={"theme": "auto"}, headers=alice)
    assert resp.status_code == 200
    assert resp.get_json()["settings"]["theme"] == "auto"

    with app.app_context():
        assert UserSettings.query.filter_by(user_email="alice@x.com").count() == 1
        assert UserSettings.query.filter_by(user_email="alice@x.com").one().theme == "auto"
