"""Registration, login and /auth/me."""

from app.services.mongo_service import UserService

REGISTRATION = {
    "name": "Riya Sharma",
    "email": "riya@college.edu",
    "password": "secure_password_123",
    "roll_no": "S123",
}


def test_register_creates_unverified_student(client):
    r = client.post("/api/auth/register", json=REGISTRATION)
    assert r.status_code == 201

    user = UserService().get_by_email("riya@college.edu")
    assert user["role"] == "student"
    assert user["is_verified"] is False
    assert user["password_hash"] != REGISTRATION["password"]


def test_register_duplicate_email(client):
    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201
    r = client.post("/api/auth/register", json=REGISTRATION)
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"


def test_register_short_password(client):
    r = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})
    assert r.status_code == 422


def test_login_and_me(client):
    client.post("/api/auth/register", json=REGISTRATION)

    r = client.post("/api/auth/login", json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]})
    assert r.status_code == 200
    tokens = r.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["role"] == "student"

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert r.status_code == 200
    me = r.json()
    assert me["_id"] == tokens["user_id"]
    assert me["name"] == "Riya Sharma"
    assert "password_hash" not in me


def test_login_wrong_password(client):
    client.post("/api/auth/register", json=REGISTRATION)
    r = client.post("/api/auth/login", json={"email": REGISTRATION["email"], "password": "wrong-password"})
    assert r.status_code == 401


def test_login_unknown_email(client):
    r = client.post("/api/auth/login", json={"email": "nobody@college.edu", "password": "whatever123"})
    assert r.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
