"""Auth flow, token revocation, profile and weekly goals."""

import pytest

pytestmark = pytest.mark.integration

from lifechrono.core.errors import ValidationError
from lifechrono.core.users.services import resolve_goals, update_weekly_goals, validate_weekly_goals


def _register(client, email="river@lifechrono.io", password="secret123"):
    return client.post("/auth/register", json={"email": email, "password": password, "name": "River"})


def test_register_login_and_me(client):
    resp = _register(client)
    assert resp.status_code == 201
    assert resp.get_json()["access_token"]

    login = client.post("/auth/login", json={"email": "RIVER@lifechrono.io", "password": "secret123"})
    assert login.status_code == 200
    token = login.get_json()["access_token"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"}).get_json()
    assert me["user"]["email"] == "river@lifechrono.io"
    assert me["user"]["weekly_goals"] == {"productive": 40, "leisure": 28, "restoration": 56, "neutral": 20}


def test_duplicate_registration_rejected(client):
    _register(client)
    resp = _register(client)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "email_already_exists"


def test_bad_credentials(client):
    _register(client)
    resp = client.post("/auth/login", json={"email": "river@lifechrono.io", "password": "wrong-pass"})
    assert resp.status_code == 401


def test_logout_revokes_refresh_token(client):
    tokens = _register(client).get_json()
    refresh_headers = {"Authorization": f"Bearer {tokens['refresh_token']}"}

    assert client.post("/auth/refresh", headers=refresh_headers).status_code == 200
    assert client.post("/auth/logout", headers=refresh_headers).status_code == 200

    resp = client.post("/auth/refresh", headers=refresh_headers)
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "token_revoked"


def test_update_goals_via_api(client, headers):
    resp = client.patch(
        "/api/users/goals",
        json={"productive": 35, "leisure": 20, "restoration": 60, "neutral": 10},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["user"]["weekly_goals"]["productive"] == 35


def test_goal_sum_over_week_rejected(client, headers):
    resp = client.patch(
        "/api/users/goals",
        json={"productive": 80, "leisure": 40, "restoration": 56, "neutral": 20},
        headers=headers,
    )
    assert resp.status_code == 400
    assert "196" in resp.get_json()["message"]


def test_negative_goal_rejected():
    with pytest.raises(ValidationError):
        validate_weekly_goals({"productive": -1, "leisure": 0, "restoration": 0, "neutral": 0})


def test_goals_resolve_to_stored_values(app, user):
    update_weekly_goals(user.id, {"productive": 30, "leisure": 30, "restoration": 50, "neutral": 0})
    goals = {c.value: v for c, v in resolve_goals(user).items()}
    assert goals == {"productive": 30, "leisure": 30, "restoration": 50, "neutral": 0}


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
