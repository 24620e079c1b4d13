import re

import pytest
from httpx import AsyncClient


def code_from(email):
    return re.search(r">(\d{6})</h1>", email["html"]).group(1)


@pytest.mark.asyncio
async def test_verify_email(client: AsyncClient, register_user, email_outbox):
    auth = await register_user("verify@scribeai.com")
    code = code_from(email_outbox.sent[0])

    response = await client.post("/auth/verify-email", json={"token": code})

    assert response.status_code == 200
    me = await client.get("/auth/user/me", headers={"Authorization": f"Bearer {auth['token']}"})
    assert me.json()["emailVerified"] is True

    again = await client.post("/auth/verify-email", json={"token": code})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "CODE_ALREADY_USED"


@pytest.mark.asyncio
async def test_verify_email_unknown_code(client: AsyncClient):
    response = await client.post("/auth/verify-email", json={"token": "000000"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "CODE_NOT_FOUND"


@pytest.mark.asyncio
async def test_resend_verification(client: AsyncClient, register_user, email_outbox):
    await register_user("resend@scribeai.com")
    email_outbox.sent.clear()

    response = await client.post("/auth/resend-verification", json={"email": "resend@scribeai.com"})
    unknown = await client.post("/auth/resend-verification", json={"email": "nobody@scribeai.com"})

    assert response.status_code == unknown.status_code == 200
    assert len(email_outbox.sent) == 1

    # The fresh code verifies the account
    verify = await client.post("/auth/verify-email", json={"token": code_from(email_outbox.sent[0])})
    assert verify.status_code == 200

    # Verified accounts get nothing more
    email_outbox.sent.clear()
    await client.post("/auth/resend-verification", json={"email": "resend@scribeai.com"})
    assert email_outbox.sent == []
