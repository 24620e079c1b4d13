from urllib.parse import parse_qs

import httpx
import pytest

from src.adapter.identity.oauth_providers import (
    GitHubIdentityProvider,
    GoogleIdentityProvider,
    MicrosoftIdentityProvider,
)


def router(routes, calls=None):
    """MockTransport answering (method, url) pairs; anything else is a 404"""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        if key not in routes:
            return httpx.Response(404)
        route = routes[key]
        if isinstance(route, Exception):
            raise route
        return route

    return httpx.MockTransport(handler)


GOOGLE_TOKEN = ("POST", "https://oauth2.googleapis.com/token")
GOOGLE_USER = ("GET", "https://www.googleapis.com/oauth2/v2/userinfo")


@pytest.mark.asyncio
async def test_google_exchange():
    calls = []
    transport = router(
        {
            GOOGLE_TOKEN: httpx.Response(200, json={"access_token": "at-1"}),
            GOOGLE_USER: httpx.Response(
                200,
                json={
                    "id": "1089",
                    "email": "ada@gmail.com",
                    "given_name": "Ada",
                    "family_name": "Lovelace",
                    "picture": "https://lh3.example.com/ada.png",
                },
            ),
        },
        calls,
    )
    provider = GoogleIdentityProvider("client-id", "client-secret", transport=transport)

    result = await provider.exchange_code("auth-code", "https://app.scribeai.com/cb")

    assert result.is_ok()
    identity = result.value
    assert identity.provider_user_id == "1089"
    assert identity.email == "ada@gmail.com"
    assert identity.first_name == "Ada"
    assert identity.avatar_url == "https://lh3.example.com/ada.png"

    form = parse_qs(calls[0].content.decode())
    assert form["code"] == ["auth-code"]
    assert form["grant_type"] == ["authorization_code"]
    assert form["redirect_uri"] == ["https://app.scribeai.com/cb"]
    assert calls[1].headers["Authorization"] == "Bearer at-1"


@pytest.mark.asyncio
async def test_rejected_code():
    transport = router({GOOGLE_TOKEN: httpx.Response(400, json={"error": "invalid_grant"})})
    provider = GoogleIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("bad", "https://app.scribeai.com/cb")

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_token_response_without_access_token():
    transport = router({GOOGLE_TOKEN: httpx.Response(200, json={"error": "bad_verification_code"})})
    provider = GoogleIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("bad", "https://app.scribeai.com/cb")

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_userinfo_failure_means_no_identity():
    transport = router(
        {
            GOOGLE_TOKEN: httpx.Response(200, json={"access_token": "at-1"}),
            GOOGLE_USER: httpx.Response(401),
        }
    )
    provider = GoogleIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_provider_unreachable():
    transport = router({GOOGLE_TOKEN: httpx.ConnectError("connection refused")})
    provider = GoogleIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.error.code == "UPSTREAM_UNAVAILABLE"


@pytest.mark.asyncio
async def test_non_json_payload():
    transport = router({GOOGLE_TOKEN: httpx.Response(200, text="<html>oops</html>")})
    provider = GoogleIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.error.code == "UPSTREAM_AUTH_FAILED"


@pytest.mark.asyncio
async def test_github_falls_back_to_verified_primary_email():
    calls = []
    transport = router(
        {
            ("POST", "https://github.com/login/oauth/access_token"): httpx.Response(
                200, json={"access_token": "gh-1"}
            ),
            ("GET", "https://api.github.com/user"): httpx.Response(
                200,
                json={"id": 42, "email": None, "name": "Grace Brewster Hopper", "avatar_url": "a"},
            ),
            ("GET", "https://api.github.com/user/emails"): httpx.Response(
                200,
                json=[
                    {"email": "old@example.com", "primary": False, "verified": True},
                    {"email": "grace@example.com", "primary": True, "verified": True},
                ],
            ),
        },
        calls,
    )
    provider = GitHubIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    identity = result.value
    assert identity.provider_user_id == "42"
    assert identity.email == "grace@example.com"
    assert identity.first_name == "Grace"
    assert identity.last_name == "Brewster Hopper"
    assert "grant_type" not in parse_qs(calls[0].content.decode())


@pytest.mark.asyncio
async def test_github_ignores_unverified_primary_email():
    transport = router(
        {
            ("POST", "https://github.com/login/oauth/access_token"): httpx.Response(
                200, json={"access_token": "gh-1"}
            ),
            ("GET", "https://api.github.com/user"): httpx.Response(200, json={"id": 42}),
            ("GET", "https://api.github.com/user/emails"): httpx.Response(
                200,
                json=[
                    {"email": "victim@example.com", "primary": True, "verified": False},
                    {"email": "other@example.com", "primary": False, "verified": True},
                ],
            ),
        }
    )
    provider = GitHubIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.is_ok()
    assert result.value.email is None


@pytest.mark.asyncio
async def test_github_without_any_email():
    transport = router(
        {
            ("POST", "https://github.com/login/oauth/access_token"): httpx.Response(
                200, json={"access_token": "gh-1"}
            ),
            ("GET", "https://api.github.com/user"): httpx.Response(200, json={"id": 42}),
            ("GET", "https://api.github.com/user/emails"): httpx.Response(403),
        }
    )
    provider = GitHubIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.is_ok()
    assert result.value.email is None


@pytest.mark.asyncio
async def test_microsoft_uses_principal_name_when_mail_missing():
    calls = []
    transport = router(
        {
            ("POST", "https://login.microsoftonline.com/common/oauth2/v2.0/token"): httpx.Response(
                200, json={"access_token": "ms-1"}
            ),
            ("GET", "https://graph.microsoft.com/v1.0/me"): httpx.Response(
                200,
                json={
                    "id": "ms-guid",
                    "mail": None,
                    "userPrincipalName": "alan@contoso.com",
                    "givenName": "Alan",
                    "surname": "Turing",
                },
            ),
        },
        calls,
    )
    provider = MicrosoftIdentityProvider("id", "secret", transport=transport)

    result = await provider.exchange_code("code", "https://app.scribeai.com/cb")

    assert result.value.email == "alan@contoso.com"
    assert result.value.last_name == "Turing"
    assert parse_qs(calls[0].content.decode())["scope"] == ["openid profile email"]
