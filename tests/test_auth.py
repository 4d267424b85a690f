# tests/test_auth.py
from conftest import PASSWORD, auth, register


def test_register_login_profile_logout(client):
    # register
    r = client.post("/api/auth/register",
                    json={"email": "T1@Example.com", "username": "  tina  ", "password": PASSWORD})
    assert r.status_code == 201
    data = r.get_json()
    assert data["token"]
    assert data["user"]["email"] == "t1@example.com"
    assert data["user"]["username"] == "tina"
    assert "password" not in data["user"]

    # login
    r = client.post("/api/auth/login", json={"email": "t1@example.com", "password": PASSWORD})
    assert r.status_code == 200
    body = r.get_json()
    token = body["token"]
    assert body["user"]["last_login"] is not None

    # profile
    r = client.get("/api/user/profile", headers=auth(token))
    assert r.status_code == 200
    profile = r.get_json()
    assert profile["user"]["email"] == "t1@example.com"
    assert profile["stats"] == {"total_notes": 0, "pinned_notes": 0}

    # logout -> token révoqué
    r = client.post("/api/auth/logout", headers=auth(token))
    assert r.status_code == 200

    r = client.get("/api/user/profile", headers=auth(token))
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "token_revoked"


def test_register_short_password_is_rejected_without_token(client):
    r = client.post("/api/auth/register",
                    json={"email": "short@example.com", "username": "shorty", "password": "12345"})
    assert r.status_code == 400
    body = r.get_json()
    assert "token" not in body
    assert body["error"]["code"] == "validation_error"
    assert "password" in body["error"]["details"]


def test_register_validates_email_and_username(client):
    r = client.post("/api/auth/register", json={"email": "nope", "username": "ab", "password": PASSWORD})
    assert r.status_code == 400
    details = r.get_json()["error"]["details"]
    assert set(details) == {"email", "username"}


def test_register_email_taken(client):
    register(client, "dup@example.com")
    r = client.post("/api/auth/register",
                    json={"email": "DUP@example.com", "username": "other", "password": PASSWORD})
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["code"] == "email_taken"
    assert "email" in err["details"]


def test_login_invalid_credentials(client):
    register(client, "bob@example.com")
    r = client.post("/api/auth/login", json={"email": "bob@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "invalid_credentials"

    r = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert r.status_code == 401


def test_login_inactive_account(client, app):
    register(client, "sleepy@example.com")
    from notesync.extensions import db
    from notesync.users.models import User
    with app.app_context():
        user = User.query.filter_by(email="sleepy@example.com").first()
        user.is_active = False
        db.session.commit()

    r = client.post("/api/auth/login", json={"email": "sleepy@example.com", "password": PASSWORD})
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "user_inactive"


def test_notes_require_bearer_token(client):
    r = client.get("/api/notes")
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "authorization_required"


def test_update_profile(client):
    token = register(client, "pat@example.com", username="pat")

    r = client.put("/api/user/profile", headers=auth(token), json={"username": "  patricia "})
    assert r.status_code == 200
    assert r.get_json()["user"]["username"] == "patricia"

    r = client.put("/api/user/profile", headers=auth(token), json={"username": "pa"})
    assert r.status_code == 400
    assert "username" in r.get_json()["error"]["details"]
