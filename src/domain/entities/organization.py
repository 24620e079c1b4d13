"""
Organization Entity

A company workspace, optionally signing users in through enterprise SSO.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import SsoProtocol


class Organization(SQLModel, table=True):
    """
    Organization entity.

    sso_config keys (camelCase, as stored by the admin tooling):
    - saml: idpEntityId, audience, idpCertificate
    - oidc: clientId, clientSecret, tokenEndpoint, userInfoEndpoint, redirectUri
    """

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    domain: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)

    sso_enabled: bool = Field(default=False)
    sso_provider: Optional[SsoProtocol] = Field(default=None)
    sso_config: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
