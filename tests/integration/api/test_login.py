import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import AuditEvent, Session, User


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, register_user, db_session):
    await register_user("login@scribeai.com")

    response = await client.post(
        "/auth/login", json={"email": "Login@ScribeAI.com", "password": "SecurePass123!"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "login@scribeai.com"
    assert data["user"]["lastLoginAt"] is not None

    me = await client.get("/auth/user/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200

    sessions = (await db_session.exec(select(Session))).all()
    assert len(sessions) == 2


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, register_user, db_session):
    """Scenario B: wrong password

    Then I get 401 INVALID_CREDENTIALS
    And no new session is created
    And the failure is audited with its reason
    """
    await register_user("login@scribeai.com")

    response = await client.post(
        "/auth/login", json={"email": "login@scribeai.com", "password": "WrongPass123!"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == {
        "code": "INVALID_CREDENTIALS",
        "message": "Invalid email or password",
    }

    # Only the session from registration
    assert len((await db_session.exec(select(Session))).all()) == 1

    failed = (
        await db_session.exec(select(AuditEvent).where(AuditEvent.action == "login_failed"))
    ).one()
    assert failed.event_metadata["reason"] == "invalid_password"


@pytest.mark.asyncio
async def test_unknown_email_looks_like_wrong_password(client: AsyncClient):
    response = await client.post(
        "/auth/login", json={"email": "ghost@scribeai.com", "password": "SecurePass123!"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_deleted_account_cannot_login(client: AsyncClient, register_user):
    body = await register_user("gone@scribeai.com")
    await client.request(
        "DELETE",
        "/auth/user/me",
        json={"password": "SecurePass123!"},
        headers={"Authorization": f"Bearer {body['token']}"},
    )

    response = await client.post(
        "/auth/login", json={"email": "gone@scribeai.com", "password": "SecurePass123!"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_remember_me_session_lasts_a_week(client: AsyncClient, register_user, db_session):
    await register_user("remember@scribeai.com")

    response = await client.post(
        "/auth/login",
        json={"email": "remember@scribeai.com", "password": "SecurePass123!", "rememberMe": True},
    )

    assert response.status_code == 200
    user = (await db_session.exec(select(User))).one()
    sessions = (await db_session.exec(select(Session).where(Session.user_id == user.id))).all()
    lifetimes = sorted((s.expires_at - s.created_at).days for s in sessions)
    assert lifetimes[-1] >= 6
