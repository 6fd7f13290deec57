from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import jwt
import pytest

from quranpro.auth import service as auth_service_module
from quranpro.auth.service import AuthService
from quranpro.database import DatabaseError
from quranpro.exceptions import ServiceUnavailable, Unauthenticated, ValidationError


def _claims(sub="google-123", email="reader@example.com", name="Reader"):
    return {"sub": sub, "email": email, "name": name, "picture": "https://example.com/p.png"}


def test_resolve_is_idempotent(db, count_rows):
    service = AuthService(db)

    first = service.resolve_google_identity("google-123", "Reader@Example.com", "Reader")
    second = service.resolve_google_identity("google-123", "reader@example.com", "Reader")

    assert first.id == second.id
    assert count_rows("users") == 1
    assert first.email == "reader@example.com"
    assert first.preferences["arabicFont"] == "Amiri"
    assert first.messages_quota == 1000
    assert db.get_user_by_id(first.id).last_login is not None


def test_resolve_links_subject_to_existing_email(db):
    existing = db.create_user(user_id="legacy-1", email="legacy@example.com", name="Legacy")

    user = AuthService(db).resolve_google_identity("google-999", "legacy@example.com", "Legacy")

    assert user.id == existing.id
    assert db.get_user_by_google_id("google-999").id == existing.id


def test_admin_role_comes_from_configuration(db):
    service = AuthService(db)

    admin = service.resolve_google_identity("google-admin", "admin@example.com", "Admin")
    reader = service.resolve_google_identity("google-reader", "reader@example.com", "Reader")

    assert admin.is_admin
    assert db.get_user_by_id(admin.id).role == "admin"
    assert not reader.is_admin


def test_resolve_rejects_invalid_email(db):
    with pytest.raises(ValidationError):
        AuthService(db).resolve_google_identity("google-1", "not-an-email", "Nobody")


def test_database_outage_is_service_unavailable(db, monkeypatch):
    def unreachable(*args, **kwargs):
        raise DatabaseError("could not connect")

    monkeypatch.setattr(db, "get_user_by_google_id", unreachable)

    with pytest.raises(ServiceUnavailable):
        AuthService(db).resolve_google_identity("google-1", "reader@example.com", "Reader")


def test_token_round_trip_and_expiry(db, make_user):
    user = make_user()
    service = AuthService(db)

    assert service.authenticate_token(service.generate_token(user.id, user.email)).id == user.id

    expired = jwt.encode(
        {"user_id": user.id, "email": user.email, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(Unauthenticated):
        service.authenticate_token(expired)

    forged = jwt.encode({"user_id": user.id}, "wrong-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        service.authenticate_token(forged)


def test_token_for_deleted_user_is_rejected(db, make_user):
    user = make_user()
    service = AuthService(db)
    token = service.generate_token(user.id, user.email)
    db.delete_user(user.id)

    with pytest.raises(Unauthenticated):
        service.authenticate_token(token)


def test_mobile_login(client, monkeypatch):
    seen = {}

    def fake_verify(token, request, audience):
        seen["token"] = token
        seen["audience"] = audience
        return _claims()

    monkeypatch.setattr(auth_service_module.id_token, "verify_oauth2_token", fake_verify)

    response = client.post("/auth/mobile", json={"idToken": "google-id-token"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "reader@example.com"
    assert seen == {"token": "google-id-token", "audience": "test-client-id.apps.googleusercontent.com"}

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


def test_mobile_login_with_bad_google_token(client, monkeypatch):
    def fake_verify(token, request, audience):
        raise ValueError("Token expired")

    monkeypatch.setattr(auth_service_module.id_token, "verify_oauth2_token", fake_verify)

    response = client.post("/auth/mobile", json={"idToken": "stale"})

    assert response.status_code == 401


def test_auth_status(client, make_user, auth_headers):
    user = make_user()

    anonymous = client.get("/auth/status").json()
    signed_in = client.get("/auth/status", headers=auth_headers(user)).json()
    garbage = client.get("/auth/status", headers={"Authorization": "Bearer nope"}).json()

    assert anonymous == {"user": None}
    assert garbage == {"user": None}
    assert signed_in["user"]["id"] == user.id
    assert signed_in["user"]["mysql_id"] == user.id


def test_google_redirect_carries_signed_state(client):
    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code == 302
    location = urlparse(response.headers["location"])
    params = parse_qs(location.query)
    assert location.netloc == "accounts.google.com"
    assert params["client_id"] == ["test-client-id.apps.googleusercontent.com"]
    assert params["state"][0]


def test_google_callback_with_bad_state_redirects_to_login(client):
    response = client.get("/auth/google/callback", params={"code": "abc", "state": "forged"}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "http://localhost:5173/login?error=auth_failed"


def test_google_callback_success(client, db, monkeypatch):
    service = AuthService(db)
    state = parse_qs(urlparse(service.build_authorization_url()).query)["state"][0]

    class FakeResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return {"id_token": "google-id-token"}

    monkeypatch.setattr(auth_service_module.requests, "post", lambda *args, **kwargs: FakeResponse())
    monkeypatch.setattr(auth_service_module.id_token, "verify_oauth2_token", lambda token, request, audience: _claims())

    response = client.get("/auth/google/callback", params={"code": "abc", "state": state}, follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("http://localhost:5173?token=")
    token = location.split("token=", 1)[1]
    assert service.verify_token(token) == db.get_user_by_email("reader@example.com").id


def test_logout(client):
    assert client.get("/logout").status_code == 200
    assert client.get("/auth/logout").json()["message"]
