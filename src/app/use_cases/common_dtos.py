"""
DTOs shared by every auth use case.

Wire format is camelCase (refreshToken, emailVerified...); snake_case is
accepted on input as well.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import User


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientContext(BaseModel):
    """Where a request came from; recorded on sessions and audit rows"""

    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class UserProfile(ApiModel):
    """
    Public view of a User.

    Never carries password_hash, two_factor_secret or backup_codes.
    """

    id: str
    email: str
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool
    phone_verified: bool
    two_factor_enabled: bool
    status: str
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AuthResponse(ApiModel):
    """Response of every login-equivalent flow"""

    user: UserProfile
    token: str
    refresh_token: str
    expires_at: datetime


class SuccessResponse(ApiModel):
    success: bool = True


def to_user_profile(user: User) -> UserProfile:
    return UserProfile(
        id=str(user.id),
        email=user.email,
        phone=user.phone,
        first_name=user.first_name,
        last_name=user.last_name,
        avatar_url=user.avatar_url,
        email_verified=user.email_verified,
        phone_verified=user.phone_verified,
        two_factor_enabled=user.two_factor_enabled,
        status=user.status.value if hasattr(user.status, "value") else str(user.status),
        last_login_at=user.last_login_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
