from datetime import timedelta

from flask_jwt_extended import create_access_token

from greenstride import db
from greenstride.models.user import User
from greenstride.routes import auth_routes


def test_create_account_then_login_returns_usable_token(client, register_and_login):
    headers = register_and_login("alice@x.com", first_name="Alice", last_name="Smith")

    resp = client.get("/api/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {
        "email": "alice@x.com",
        "firstName": "Alice",
        "lastName": "Smith",
        "dateOfBirth": "1990-05-17",
    }


def test_duplicate_account_is_conflict(client, register_and_login):
    register_and_login("alice@x.com")

    resp = client.post("/api/create-account", json={"email": "Alice@X.com", "password": "other123"})
    assert resp.status_code == 409


def test_create_account_requires_email_and_password(client):
    resp = client.post("/api/create-account", json={"email": "bob@x.com"})
    assert resp.status_code == 400

    resp = client.post("/api/create-account", json={"password": "secret123"})
    assert resp.status_code == 400


def test_create_account_rejects_malformed_birth_date(client):
    resp = client.post(
        "/api/create-account",
        json={"email": "bob@x.com", "password": "secret123", "dateOfBirth": "17/05/1990"},
    )
    assert resp.status_code == 400


def test_password_is_hashed(app, register_and_login):
    register_and_login("alice@x.com", password="secret123")

    with app.app_context():
        user = User.query.filter_by(email="alice@x.com").one()
        assert user.password_hash != "secret123"
        assert user.check_password("secret123")


def test_login_with_wrong_password_is_unauthorized(client, register_and_login):
    register_and_login("alice@x.com")

    resp = client.post("/api/login", json={"email": "alice@x.com", "password": "nope"})
    assert resp.status_code == 401

    resp = client.post("/api/login", json={"email": "ghost@x.com", "password": "nope"})
    assert resp.status_code == 401


def test_missing_token_is_401(client):
    assert client.get("/api/profile").status_code == 401


def test_garbage_token_is_403(client):
    resp = client.get("/api/profile", headers={"Authorization": "not-a-jwt"})
    assert resp.status_code == 403


def test_bearer_prefixed_token_is_rejected(client, register_and_login):
    headers = register_and_login("alice@x.com")

    resp = client.get("/api/profile", headers={"Authorization": f"Bearer {headers['Authorization']}"})
    assert resp.status_code == 403


def test_expired_token_is_403(app, client, register_and_login):
    register_and_login("alice@x.com")
    with app.app_context():
        token = create_access_token(identity="alice@x.com", expires_delta=timedelta(seconds=-5))

    resp = client.get("/api/profile", headers={"Authorization": token})
    assert resp.status_code == 403


def test_token_for_deleted_account_is_403(app, client, register_and_login):
    headers = register_and_login("alice@x.com")

    with app.app_context():
        db.session.delete(User.query.filter_by(email="alice@x.com").one())
        db.session.commit()

    resp = client.get("/api/profile", headers=headers)
    assert resp.status_code == 403


def test_update_profile(client, register_and_login):
    headers = register_and_login("alice@x.com")

    resp = client.put(
        "/api/profile",
        json={"firstName": "Alicia", "dateOfBirth": "1991-01-02"},
        headers=headers,
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["firstName"] == "Alicia"
    assert body["lastName"] == "User"
    assert body["dateOfBirth"] == "1991-01-02"


def test_health_is_public(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_account_created_concurrently_is_conflict(app, client, register_and_login, monkeypatch):
    register_and_login("alice@x.com")

    # the existence check misses, as if another request inserted meanwhile
    monkeypatch.setattr(auth_routes, "_find_user", lambda email: None)

    resp = client.post("/api/create-account", json={"email": "alice@x.com", "password": "other123"})
    assert resp.status_code == 409

    with app.app_context():
        assert User.query.filter_by(email="alice@x.com").count() == 1
