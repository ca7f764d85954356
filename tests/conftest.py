import pytest

from config import TestConfig
from greenstride import create_app


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_and_login(client):
    """Create an account and return headers carrying its token."""

    def _register(email, password="secret123", first_name="Test", last_name="User"):
        resp = client.post(
            "/api/create-account",
            json={
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
                "dateOfBirth": "1990-05-17",
            },
        )
        assert resp.status_code == 201, resp.get_json()

        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": resp.get_json()["token"]}

    return _register


@pytest.fixture
def make_friends(client):
    """Send and accept a request so the two users are friends."""

    def _make_friends(headers_a, email_a, headers_b, email_b):
        resp = client.post("/api/friends/request", json={"friendEmail": email_b}, headers=headers_a)
        assert resp.status_code == 201
        resp = client.post("/api/friends/accept", json={"requesterEmail": email_a}, headers=headers_b)
        assert resp.status_code == 200

    return _make_friends
