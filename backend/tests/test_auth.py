"""
Tests for the sign-in endpoint, including implicit registration.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from cinebook.models.user import User
from conftest import count_rows


@pytest.mark.asyncio
async def test_signin_registers_new_user(client: AsyncClient, db_session):
    """Unseen username creates exactly one user and returns its id."""
    response = await client.post("/api/signin", data={"username": "bob", "password": "builder"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["message"] == "New user created and signed in successfully."
    assert isinstance(data["user_id"], int)
    assert await count_rows(db_session, User) == 1


@pytest.mark.asyncio
async def test_signin_existing_user(client: AsyncClient, db_session, test_user):
    """Matching password signs in without creating a row."""
    response = await client.post("/api/signin", data={"username": "alice", "password": "wonderland"})
    assert response.status_code == 200
    data = response.json()
    assert data == {"status": "success", "message": "Sign-in successful."}
    assert await count_rows(db_session, User) == 1


@pytest.mark.asyncio
async def test_signin_repeated_is_idempotent(client: AsyncClient, db_session):
    """Second sign-in with the same credentials does not register again."""
    first = await client.post("/api/signin", data={"username": "carol", "password": "pw"})
    second = await client.post("/api/signin", data={"username": "carol", "password": "pw"})
    assert first.status_code == 200
    assert second.status_code == 200
    assert "user_id" not in second.json()
    assert await count_rows(db_session, User) == 1


@pytest.mark.asyncio
async def test_signin_wrong_password(client: AsyncClient, db_session, test_user):
    """Wrong password returns 401 and creates nothing."""
    response = await client.post("/api/signin", data={"username": "alice", "password": "looking-glass"})
    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Invalid username or password."}
    assert await count_rows(db_session, User) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("form", [
    {"username": "dave"},
    {"password": "secret"},
    {"username": "", "password": "secret"},
    {},
])
async def test_signin_missing_fields(client: AsyncClient, db_session, form):
    """Missing or empty credentials return 400 before touching the database."""
    response = await client.post("/api/signin", data=form)
    assert response.status_code == 400
    assert response.json()["message"] == "Username and password are required."
    assert await count_rows(db_session, User) == 0


@pytest.mark.asyncio
async def test_password_is_not_stored_in_cleartext(client: AsyncClient, db_session):
    await client.post("/api/signin", data={"username": "erin", "password": "hunter2"})
    user = (await db_session.execute(select(User).where(User.username == "erin"))).scalar_one()
    assert user.hashed_password != "hunter2"
    assert user.hashed_password.startswith("$2")


@pytest.mark.asyncio
async def test_signin_without_auto_register(client: AsyncClient, db_session, settings, monkeypatch):
    """With auto-registration off, an unknown username is rejected."""
    monkeypatch.setattr(settings, "AUTO_REGISTER_ON_SIGNIN", False)
    response = await client.post("/api/signin", data={"username": "frank", "password": "pw"})
    assert response.status_code == 401
    assert await count_rows(db_session, User) == 0


@pytest.mark.asyncio
async def test_signin_database_error(client: AsyncClient, db_session, monkeypatch):
    """Driver failures surface as a generic 500."""

    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db_session, "execute", broken_execute)
    response = await client.post("/api/signin", data={"username": "gina", "password": "pw"})
    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "Server error during authentication/registration.",
    }


@pytest.mark.asyncio
async def test_signin_driver_error(client: AsyncClient, db_session, monkeypatch):
    """Unwrapped connection errors get the same generic sign-in 500."""

    async def unreachable_execute(*args, **kwargs):
        raise ConnectionRefusedError("database unreachable")

    monkeypatch.setattr(db_session, "execute", unreachable_execute)
    response = await client.post("/api/signin", data={"username": "hank", "password": "pw"})
    assert response.status_code == 500
    assert response.json()["message"] == "Server error during authentication/registration."
