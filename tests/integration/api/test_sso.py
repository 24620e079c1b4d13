import base64

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import Organization, OrganizationMember, SsoProtocol, User
from tests.fixtures.saml_idp import SigningIdentityProvider


@pytest.fixture(scope="module")
def idp():
    return SigningIdentityProvider()


@pytest_asyncio.fixture
async def acme(db_session, idp):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        organization = await uow.organizations.create(
            Organization(
                name="Acme",
                domain="acme.com",
                sso_enabled=True,
                sso_provider=SsoProtocol.saml,
                sso_config=idp.sso_config(),
            )
        )
        organization_id = organization.id
        await uow.commit()
    return organization_id


def saml_response(idp, email, **fields):
    return idp.response(email=None, name_id=email, **fields)


@pytest.mark.asyncio
async def test_sso_login_provisions_member(client: AsyncClient, acme, idp, db_session):
    response = await client.post(
        "/auth/sso", json={"domain": "acme.com", "samlResponse": saml_response(idp, "jane@acme.com")}
    )

    assert response.status_code == 200, response.text
    user = response.json()["user"]
    assert user["email"] == "jane@acme.com"
    assert user["emailVerified"] is True
    assert user["firstName"] == "Jane"

    member = (await db_session.exec(select(OrganizationMember))).one()
    assert member.organization_id == acme
    assert member.role.value == "member"

    me = await client.get(
        "/auth/user/me", headers={"Authorization": f"Bearer {response.json()['token']}"}
    )
    assert me.json()["organizationId"] == str(acme)
    assert me.json()["role"] == "member"

    again = await client.post(
        "/auth/sso", json={"domain": "acme.com", "samlResponse": saml_response(idp, "jane@acme.com")}
    )
    assert again.status_code == 200
    assert len((await db_session.exec(select(OrganizationMember))).all()) == 1
    assert len((await db_session.exec(select(User))).all()) == 1


@pytest.mark.asyncio
async def test_sso_unknown_domain(client: AsyncClient, idp):
    response = await client.post(
        "/auth/sso",
        json={"domain": "nowhere.com", "samlResponse": saml_response(idp, "x@nowhere.com")},
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SSO_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_sso_missing_saml_response(client: AsyncClient, acme):
    response = await client.post("/auth/sso", json={"domain": "acme.com", "oidcCode": "abc"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELD"


@pytest.mark.asyncio
async def test_sso_rejects_garbage_assertion(client: AsyncClient, acme):
    response = await client.post(
        "/auth/sso", json={"domain": "acme.com", "samlResponse": "bm90IHhtbA=="}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_unsigned_assertion_cannot_take_over_account(
    client: AsyncClient, acme, idp, register_user
):
    await register_user(email="victim@acme.com")

    response = await client.post(
        "/auth/sso",
        json={
            "domain": "acme.com",
            "samlResponse": saml_response(idp, "victim@acme.com", signed=False),
        },
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UPSTREAM_AUTH_FAILED"
    assert "token" not in response.json()


@pytest.mark.asyncio
async def test_tampered_assertion_is_rejected(client: AsyncClient, acme, idp):
    signed = idp.sign(idp.document(email=None, name_id="jane@acme.com"))
    tampered = signed.replace(b"jane@acme.com", b"boss@acme.com")

    response = await client.post(
        "/auth/sso",
        json={"domain": "acme.com", "samlResponse": base64.b64encode(tampered).decode()},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signed_assertion_for_foreign_domain_is_rejected(
    client: AsyncClient, acme, idp, register_user
):
    await register_user(email="victim@gmail.com")

    response = await client.post(
        "/auth/sso",
        json={"domain": "acme.com", "samlResponse": saml_response(idp, "victim@gmail.com")},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "SSO_DOMAIN_MISMATCH"
