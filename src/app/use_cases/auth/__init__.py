"""
Authentication Use Cases

All authentication-related business logic.
"""

from .dtos import (
    LoginCommand,
    LogoutCommand,
    PhoneLoginCommand,
    RegisterCommand,
    SocialLoginCommand,
    SsoLoginCommand,
)
from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .verify_phone_use_case import VerifyPhoneUseCase
from .send_phone_code_use_case import SendPhoneCodeUseCase
from .phone_login_use_case import PhoneLoginUseCase
from .social_login_use_case import SocialLoginUseCase
from .sso_login_use_case import SsoLoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "VerifyPhoneUseCase",
    "SendPhoneCodeUseCase",
    "PhoneLoginUseCase",
    "SocialLoginUseCase",
    "SsoLoginUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "LogoutCommand",
    "PhoneLoginCommand",
    "SocialLoginCommand",
    "SsoLoginCommand",
]
