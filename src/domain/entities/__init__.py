"""
Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    OrganizationRole,
    SocialProvider,
    SsoProtocol,
    UserStatus,
    VerificationType,
)

# Export all entities
from .user import User
from .session import Session
from .verification_code import VerificationCode
from .social_account import SocialAccount
from .organization import Organization
from .organization_member import OrganizationMember
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "OrganizationRole",
    "SocialProvider",
    "SsoProtocol",
    "UserStatus",
    "VerificationType",
    # Entities
    "User",
    "Session",
    "VerificationCode",
    "SocialAccount",
    "Organization",
    "OrganizationMember",
    "AuditEvent",
]
