"""Account, login, profile and preference endpoints."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from adaptive_chat.db.models import User
from adaptive_chat.services import credentials
from adaptive_chat.services.credentials import hash_password, verify_password


async def test_register_returns_summary_without_token(client):
    response = await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "Ada@Example.com", "password": "pw-123456"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["name"] == "Ada"
    assert "token" not in body
    assert "passwordHash" not in body["user"]


async def test_register_duplicate_email_is_rejected(client):
    payload = {"name": "Ada", "email": "ada@example.com", "password": "pw-123456"}
    assert (await client.post("/api/users/register", json=payload)).status_code == 201

    response = await client.post("/api/users/register", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "User already exists"}


async def test_register_race_on_same_email_is_a_conflict(client, monkeypatch):
    payload = {"name": "Ada", "email": "ada@example.com", "password": "pw-123456"}
    assert (await client.post("/api/users/register", json=payload)).status_code == 201

    async def nobody(db, email):
        return None

    # The concurrent request passed the lookup before the first insert committed
    monkeypatch.setattr(credentials, "get_user_by_email", nobody)
    response = await client.post("/api/users/register", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "User already exists"}


async def test_register_requires_all_fields(client):
    response = await client.post(
        "/api/users/register", json={"name": "Ada", "email": "ada@example.com"}
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "All fields are required"}


async def test_register_rejects_malformed_email(client):
    response = await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "not-an-email", "password": "pw-123456"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request"


async def test_login_returns_token_and_profile(client):
    await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "pw-123456"},
    )

    response = await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "pw-123456"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 7 * 24 * 60 * 60
    assert body["token"]
    user = body["user"]
    assert user["preferences"]["defaultMode"] == "developer"
    assert user["preferences"]["themes"] == {
        "developer": "neural-blue",
        "learner": "aurora-teal",
        "hr": "solar-amber",
    }
    assert user["stats"]["streakDays"] == 1
    assert user["integrations"]["github"]["connected"] is False


async def test_login_failures_are_indistinguishable(client):
    await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "pw-123456"},
    )

    wrong_password = await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "nope"}
    )
    unknown_email = await client.post(
        "/api/users/login", json={"email": "ghost@example.com", "password": "nope"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


async def test_login_requires_email_and_password(client):
    response = await client.post("/api/users/login", json={"email": "ada@example.com"})

    assert response.status_code == 400


async def test_protected_routes_require_bearer_token(client):
    assert (await client.get("/api/users/profile")).status_code == 401

    response = await client.get(
        "/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json() == {"detail": "Could not validate credentials"}


async def test_get_profile(client, auth_headers):
    response = await client.get("/api/users/profile", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "ada@example.com"


async def test_update_profile_partial(client, auth_headers):
    response = await client.put(
        "/api/users/profile",
        json={"name": "Ada Lovelace", "profilePicture": "https://img.example/ada.png"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Ada Lovelace"
    assert user["email"] == "ada@example.com"
    assert user["profilePicture"] == "https://img.example/ada.png"


async def test_update_profile_email_in_use(client, auth_headers, login_as):
    await login_as("grace@example.com")

    response = await client.put(
        "/api/users/profile", json={"email": "grace@example.com"}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Email already in use"}


async def test_preferences_theme_update_is_merged_per_mode(client, auth_headers):
    response = await client.put(
        "/api/users/preferences",
        json={"themes": {"learner": "sage-green"}, "darkMode": False},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Preferences updated successfully"

    preferences = (await client.get("/api/users/preferences", headers=auth_headers)).json()
    assert preferences["themes"] == {
        "developer": "neural-blue",
        "learner": "sage-green",
        "hr": "solar-amber",
    }
    assert preferences["darkMode"] is False
    assert preferences["animationsEnabled"] is True
    assert preferences["defaultMode"] == "developer"


async def test_preferences_reject_theme_of_another_mode(client, auth_headers):
    response = await client.put(
        "/api/users/preferences",
        json={"themes": {"hr": "neural-blue"}},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert "neural-blue" in response.json()["detail"]


async def test_stats_after_login(client, auth_headers):
    response = await client.get("/api/users/stats", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["totalChats"] == 0
    assert stats["favoriteMode"] == "developer"
    assert stats["learningXP"] == 0
    assert stats["streakDays"] == 1


async def test_streak_advances_on_next_day_login(client, db_session):
    await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "pw-123456"},
    )
    await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "pw-123456"}
    )

    user = (await db_session.execute(select(User))).scalar_one()
    user.last_active = datetime.now(timezone.utc) - timedelta(days=1)
    await db_session.commit()

    response = await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "pw-123456"}
    )

    assert response.json()["user"]["stats"]["streakDays"] == 2


def test_password_hash_roundtrip():
    hashed = hash_password("correct horse", iterations=1000)

    assert hashed.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("correct horse", "garbage")


async def test_password_whitespace_is_significant(client):
    await client.post(
        "/api/users/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "  secret  "},
    )

    trimmed = await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "secret"}
    )
    exact = await client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "  secret  "}
    )

    assert trimmed.status_code == 400
    assert exact.status_code == 200
