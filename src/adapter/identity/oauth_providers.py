"""
OAuth2 authorization-code exchange for social login providers.

Each provider performs two sequential calls (token exchange, then userinfo).
Both must succeed or the exchange fails; no partial identity is returned.
"""

import logging
from typing import Optional

import httpx

from libs.result import Error, Result, Return
from src.app.services.identity import ExternalIdentity, IIdentityProvider

logger = logging.getLogger(__name__)


class OAuth2IdentityProvider(IIdentityProvider):
    name = "oauth2"
    token_url: str
    userinfo_url: str
    scope: Optional[str] = None

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.transport = transport

    def _token_params(self, code: str, redirect_uri: str) -> dict:
        params = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }
        if self.scope:
            params["scope"] = self.scope
        return params

    async def exchange_code(self, code: str, redirect_uri: str) -> Result[ExternalIdentity]:
        failed = Error("UPSTREAM_AUTH_FAILED", f"Failed to authenticate with {self.name}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                token_response = await client.post(
                    self.token_url,
                    data=self._token_params(code, redirect_uri),
                    headers={"Accept": "application/json"},
                )
                if token_response.is_error:
                    logger.warning(
                        f"{self.name} token exchange failed: {token_response.status_code}"
                    )
                    return Return.err(failed)

                access_token = token_response.json().get("access_token")
                if not access_token:
                    logger.warning(f"{self.name} token exchange returned no access token")
                    return Return.err(failed)

                headers = {"Authorization": f"Bearer {access_token}"}
                user_response = await client.get(self.userinfo_url, headers=headers)
                if user_response.is_error:
                    logger.warning(
                        f"{self.name} userinfo request failed: {user_response.status_code}"
                    )
                    return Return.err(failed)

                identity = await self._to_identity(client, headers, user_response.json())
        except httpx.TransportError as exc:
            logger.warning(f"{self.name} unreachable: {exc!r}")
            return Return.err(
                Error("UPSTREAM_UNAVAILABLE", f"{self.name} is unavailable, try again later")
            )
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning(f"{self.name} returned an unexpected payload", exc_info=True)
            return Return.err(failed)

        return Return.ok(identity)

    async def _to_identity(
        self, client: httpx.AsyncClient, headers: dict, data: dict
    ) -> ExternalIdentity:
        raise NotImplementedError


class GoogleIdentityProvider(OAuth2IdentityProvider):
    name = "google"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://www.googleapis.com/oauth2/v2/userinfo"

    async def _to_identity(self, client, headers, data):
        return ExternalIdentity(
            provider_user_id=str(data["id"]),
            email=data.get("email"),
            first_name=data.get("given_name"),
            last_name=data.get("family_name"),
            avatar_url=data.get("picture"),
            raw=data,
        )


class GitHubIdentityProvider(OAuth2IdentityProvider):
    name = "github"
    token_url = "https://github.com/login/oauth/access_token"
    userinfo_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"

    def _token_params(self, code, redirect_uri):
        params = super()._token_params(code, redirect_uri)
        params.pop("grant_type")
        return params

    async def _to_identity(self, client, headers, data):
        email = data.get("email")
        if not email:
            # Private emails are only listed on /user/emails
            emails_response = await client.get(self.emails_url, headers=headers)
            if emails_response.is_success:
                primary = next(
                    (e for e in emails_response.json() if e.get("primary") and e.get("verified")),
                    None,
                )
                email = primary.get("email") if primary else None

        first_name, last_name = None, None
        if data.get("name"):
            parts = data["name"].split(" ")
            first_name = parts[0]
            last_name = " ".join(parts[1:]) or None

        return ExternalIdentity(
            provider_user_id=str(data["id"]),
            email=email,
            first_name=first_name,
            last_name=last_name,
            avatar_url=data.get("avatar_url"),
            raw=data,
        )


class MicrosoftIdentityProvider(OAuth2IdentityProvider):
    name = "microsoft"
    token_url = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
    userinfo_url = "https://graph.microsoft.com/v1.0/me"
    scope = "openid profile email"

    async def _to_identity(self, client, headers, data):
        # Graph exposes no avatar URL
        return ExternalIdentity(
            provider_user_id=str(data["id"]),
            email=data.get("mail") or data.get("userPrincipalName"),
            first_name=data.get("givenName"),
            last_name=data.get("surname"),
            raw=data,
        )
