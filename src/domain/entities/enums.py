"""
Auth Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class VerificationType(str, Enum):
    """What a verification code proves"""

    email_verification = "email_verification"
    phone_verification = "phone_verification"
    password_reset = "password_reset"
    two_factor = "two_factor"


class SocialProvider(str, Enum):
    """External identity providers a user can link"""

    google = "google"
    github = "github"
    microsoft = "microsoft"
    apple = "apple"
    facebook = "facebook"
    twitter = "twitter"


class OrganizationRole(str, Enum):
    """User role within an organization"""

    owner = "owner"
    admin = "admin"
    member = "member"


class SsoProtocol(str, Enum):
    """Enterprise SSO protocol configured for an organization"""

    saml = "saml"
    oidc = "oidc"
