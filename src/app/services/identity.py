"""
Identity exchange contracts for social login and enterprise SSO.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from libs.result import Result
from src.domain.entities import SocialProvider


@dataclass
class ExternalIdentity:
    """Normalized identity returned by any provider."""

    provider_user_id: str
    email: Optional[str]
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    raw: dict = field(default_factory=dict)


class IIdentityProvider(ABC):
    """OAuth2 authorization-code exchange for one social provider."""

    @abstractmethod
    async def exchange_code(self, code: str, redirect_uri: str) -> Result[ExternalIdentity]:
        """
        Exchange an authorization code for the user's identity.

        Both the token exchange and the userinfo fetch must succeed.

        Errors:
            - UPSTREAM_AUTH_FAILED: Provider rejected the code or token
            - UPSTREAM_UNAVAILABLE: Provider unreachable or timed out
        """
        pass


class ISsoValidator(ABC):
    """Validates an enterprise SSO credential against an organization's config."""

    @abstractmethod
    async def validate(self, credential: str, sso_config: dict) -> Result[ExternalIdentity]:
        pass


class IdentityProviderRegistry:
    def __init__(self, providers: Dict[SocialProvider, IIdentityProvider]):
        self._providers = dict(providers)

    def get(self, provider: SocialProvider) -> Optional[IIdentityProvider]:
        return self._providers.get(provider)
