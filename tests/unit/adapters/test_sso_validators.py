import base64
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest

from src.adapter.identity.sso_validators import OidcCodeValidator, SamlAssertionValidator
from src.domain.base import utcnow
from tests.fixtures.saml_idp import SigningIdentityProvider


@pytest.fixture(scope="module")
def idp():
    return SigningIdentityProvider()


@pytest.fixture(scope="module")
def rogue_idp():
    return SigningIdentityProvider(common_name="idp.attacker.example")


@pytest.mark.asyncio
async def test_valid_saml_response(idp):
    result = await SamlAssertionValidator().validate(idp.response(), idp.sso_config())

    assert result.is_ok()
    identity = result.value
    assert identity.email == "jane@acme.com"
    assert identity.first_name == "Jane"
    assert identity.last_name == "Doe"
    assert identity.provider_user_id == "jane.doe"


@pytest.mark.asyncio
async def test_certificate_without_pem_armor(idp):
    body = "".join(
        line for line in idp.certificate.splitlines() if "CERTIFICATE" not in line
    )

    result = await SamlAssertionValidator().validate(
        idp.response(), idp.sso_config(idpCertificate=body)
    )

    assert result.is_ok()


@pytest.mark.asyncio
async def test_saml_email_from_name_id(idp):
    credential = idp.response(email=None, name_id="jane@acme.com")

    result = await SamlAssertionValidator().validate(credential, idp.sso_config())

    assert result.value.email == "jane@acme.com"


@pytest.mark.asyncio
async def test_expired_assertion(idp):
    credential = idp.response(not_on_or_after=utcnow() - timedelta(minutes=1))

    result = await SamlAssertionValidator().validate(credential, idp.sso_config())

    assert result.error.code == "UPSTREAM_AUTH_FAILED"
    assert result.error.message == "SAML assertion expired"


@pytest.mark.asyncio
async def test_unsigned_response_is_rejected(idp):
    credential = idp.response(signed=False)

    result = await SamlAssertionValidator().validate(credential, idp.sso_config())

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_tampered_response_is_rejected(idp):
    signed = idp.sign(idp.document(email="jane@acme.com"))
    tampered = signed.replace(b"jane@acme.com", b"ceo@acme.com")

    result = await SamlAssertionValidator().validate(
        base64.b64encode(tampered).decode(), idp.sso_config()
    )

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_response_signed_by_another_key_is_rejected(idp, rogue_idp):
    result = await SamlAssertionValidator().validate(rogue_idp.response(), idp.sso_config())

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.parametrize("missing", ["idpEntityId", "audience", "idpCertificate"])
@pytest.mark.asyncio
async def test_incomplete_saml_config(idp, missing):
    config = idp.sso_config()
    del config[missing]

    result = await SamlAssertionValidator().validate(idp.response(), config)

    assert result.error.code == "SSO_NOT_CONFIGURED"


@pytest.mark.parametrize(
    "fields",
    [
        {"issuer": "https://evil.example.com"},
        {"audience": "https://someone-else.example.com"},
        {"status": "urn:oasis:names:tc:SAML:2.0:status:Requester"},
    ],
)
@pytest.mark.asyncio
async def test_signed_but_mismatched_responses(idp, fields):
    result = await SamlAssertionValidator().validate(idp.response(**fields), idp.sso_config())

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.parametrize(
    "credential",
    [
        base64.b64encode(b"not xml at all").decode(),
        "%%%not-base64%%%",
        base64.b64encode(
            b'<?xml version="1.0"?><!DOCTYPE lolz [<!ENTITY lol "lol">]><root>&lol;</root>'
        ).decode(),
    ],
)
@pytest.mark.asyncio
async def test_malformed_saml_responses(idp, credential):
    result = await SamlAssertionValidator().validate(credential, idp.sso_config())

    assert result.is_err()
    assert result.error.code == "UPSTREAM_AUTH_FAILED"



OIDC_CONFIG = {
    "clientId": "acme-client",
    "clientSecret": "acme-secret",
    "tokenEndpoint": "https://login.acme.com/token",
    "userInfoEndpoint": "https://login.acme.com/userinfo",
    "redirectUri": "https://app.scribeai.com/sso/callback",
}


@pytest.mark.asyncio
async def test_oidc_code_exchange():
    calls = []

    def handler(request):
        calls.append(request)
        if request.url.path == "/token":
            return httpx.Response(200, json={"access_token": "oidc-at"})
        return httpx.Response(
            200,
            json={"sub": "acme-42", "email": "Jane@Acme.com", "given_name": "Jane", "family_name": "Doe"},
        )

    validator = OidcCodeValidator(transport=httpx.MockTransport(handler))

    result = await validator.validate("oidc-code", OIDC_CONFIG)

    assert result.value.provider_user_id == "acme-42"
    assert result.value.email == "Jane@Acme.com"
    form = parse_qs(calls[0].content.decode())
    assert form["client_id"] == ["acme-client"]
    assert form["code"] == ["oidc-code"]
    assert calls[1].headers["Authorization"] == "Bearer oidc-at"


@pytest.mark.asyncio
async def test_oidc_incomplete_config():
    result = await OidcCodeValidator().validate("code", {"clientId": "x"})

    assert result.error.code == "SSO_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_oidc_rejected_code():
    validator = OidcCodeValidator(
        transport=httpx.MockTransport(lambda request: httpx.Response(400))
    )

    result = await validator.validate("code", OIDC_CONFIG)

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_oidc_unreachable():
    def handler(request):
        raise httpx.ConnectError("refused")

    validator = OidcCodeValidator(transport=httpx.MockTransport(handler))

    result = await validator.validate("code", OIDC_CONFIG)

    assert result.error.code == "UPSTREAM_UNAVAILABLE"
