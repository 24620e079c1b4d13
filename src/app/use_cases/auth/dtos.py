"""
Authentication Use Case DTOs (Data Transfer Objects)

Commands are built by the API layer after HTTP validation passes.
"""

from typing import Optional

from pydantic import BaseModel, Field

from src.app.use_cases.common_dtos import ClientContext
from src.domain.entities import SocialProvider


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    client: ClientContext = Field(default_factory=ClientContext)


class LoginCommand(BaseModel):
    email: str
    password: str
    two_factor_code: Optional[str] = None
    remember_me: bool = False
    client: ClientContext = Field(default_factory=ClientContext)


class PhoneLoginCommand(BaseModel):
    phone: str
    verification_code: str
    client: ClientContext = Field(default_factory=ClientContext)


class SocialLoginCommand(BaseModel):
    provider: SocialProvider
    code: str
    redirect_uri: str
    client: ClientContext = Field(default_factory=ClientContext)


class SsoLoginCommand(BaseModel):
    """Exactly one of saml_response / oidc_code is expected, per the organization's protocol"""

    domain: str
    saml_response: Optional[str] = None
    oidc_code: Optional[str] = None
    client: ClientContext = Field(default_factory=ClientContext)


class LogoutCommand(BaseModel):
    refresh_token: Optional[str] = None
    all_devices: bool = False
