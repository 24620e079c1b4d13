from datetime import timedelta
from typing import Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import EmailStr, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.utils.client_context import get_client_context
from src.app.services.identity import IdentityProviderRegistry, ISsoValidator
from src.app.services.notifications import AuthNotifier
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import AuthPrincipal, SessionManager
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ConfirmPasswordResetUseCase,
    LoginCommand,
    LoginUseCase,
    LogoutCommand,
    LogoutUseCase,
    PhoneLoginCommand,
    PhoneLoginUseCase,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResendVerificationUseCase,
    SendPhoneCodeUseCase,
    SocialLoginCommand,
    SocialLoginUseCase,
    SsoLoginCommand,
    SsoLoginUseCase,
    VerifyEmailUseCase,
    VerifyPhoneUseCase,
)
from src.app.use_cases.common_dtos import ApiModel, AuthResponse, ClientContext, SuccessResponse
from src.domain.entities import SocialProvider, SsoProtocol
from src.depends import (
    get_current_user,
    get_identity_providers,
    get_notifier,
    get_password_hasher,
    get_session_manager,
    get_sso_validators,
    get_totp_service,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

EMAIL_VERIFICATION_TTL = ApplicationConfig.EMAIL_VERIFICATION_TTL_HOURS
PHONE_CODE_TTL = ApplicationConfig.PHONE_CODE_TTL_MINUTES
PASSWORD_RESET_TTL = ApplicationConfig.PASSWORD_RESET_TTL_MINUTES


class RegisterRequest(ApiModel):
    """
    Register HTTP request payload

    Password policy is enforced by the use case so every rule is reported.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="Password (8+ chars, upper, lower, digit, special)")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
    notifier: AuthNotifier = Depends(get_notifier),
    client: ClientContext = Depends(get_client_context),
):
    """
    Register

    Creates an email/password account, emails a verification code and
    returns a signed-in session.

    Raises:
        - 400 Bad Request: Invalid email/phone or password policy violation
        - 409 Conflict: Email or phone already registered
    """
    command = RegisterCommand(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        client=client,
    )

    use_case = RegisterUseCase(
        uow,
        sessions,
        hasher,
        notifier,
        verification_ttl=timedelta(hours=EMAIL_VERIFICATION_TTL),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(ApiModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    two_factor_code: Optional[str] = Field(None, description="TOTP or backup code")
    remember_me: bool = Field(False, description="Keep the session for 7 days")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
    totp: TotpService = Depends(get_totp_service),
    client: ClientContext = Depends(get_client_context),
):
    """
    Login

    Raises:
        - 401 Unauthorized: Invalid credentials or invalid 2FA code
        - 400 Bad Request: TWO_FACTOR_REQUIRED (2FA enabled, no code sent)
    """
    use_case = LoginUseCase(uow, sessions, hasher, totp)
    result = await use_case.execute(
        LoginCommand(
            email=request.email,
            password=request.password,
            two_factor_code=request.two_factor_code,
            remember_me=request.remember_me,
            client=client,
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LogoutRequest(ApiModel):
    refresh_token: Optional[str] = None
    all_devices: bool = False


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def logout(
    request: Optional[LogoutRequest] = None,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Logout - revokes the current session, the one owning refreshToken, or all
    of them (allDevices).

    Always returns success.
    """
    request = request or LogoutRequest()
    use_case = LogoutUseCase(uow, sessions)
    return await use_case.execute(
        principal,
        LogoutCommand(refresh_token=request.refresh_token, all_devices=request.all_devices),
    )


class RefreshRequest(ApiModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Refresh Token

    Single-use rotation: the presented refresh token stops working.

    Raises:
        - 401 Unauthorized: Unknown, rotated, revoked or expired refresh token
    """
    use_case = RefreshTokenUseCase(uow, sessions)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(ApiModel):
    email: EmailStr = Field(..., description="User email address")


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def reset_password(
    request: ResetPasswordRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: AuthNotifier = Depends(get_notifier),
):
    """
    Request Password Reset

    Always returns success (no email enumeration). The email goes out after
    the response is sent.
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        notifier,
        background_tasks.add_task,
        reset_ttl=timedelta(minutes=PASSWORD_RESET_TTL),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ConfirmResetPasswordRequest(ApiModel):
    token: str = Field(..., min_length=1, description="Password reset token from email")
    new_password: str = Field(..., description="New password")


@router.post(
    "/reset-password/confirm", status_code=status.HTTP_200_OK, response_model=SuccessResponse
)
async def confirm_reset_password(
    request: ConfirmResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
):
    """
    Confirm Password Reset

    Sets the new password and signs the user out everywhere.

    Raises:
        - 400 Bad Request: Password policy violation or expired token
        - 404 Not Found: Unknown token
        - 409 Conflict: Token already used
    """
    use_case = ConfirmPasswordResetUseCase(uow, sessions, hasher)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyEmailRequest(ApiModel):
    token: str = Field(..., min_length=1, description="Email verification code")


@router.post("/verify-email", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def verify_email(request: VerifyEmailRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Verify Email

    Raises:
        - 404 Not Found: Unknown code
        - 409 Conflict: Code already used
        - 400 Bad Request: Code expired
    """
    use_case = VerifyEmailUseCase(uow)
    result = await use_case.execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResendVerificationRequest(ApiModel):
    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/resend-verification", status_code=status.HTTP_200_OK, response_model=SuccessResponse
)
async def resend_verification(
    request: ResendVerificationRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: AuthNotifier = Depends(get_notifier),
):
    """Resend Verification Email - same response for every email (no enumeration)"""
    use_case = ResendVerificationUseCase(
        uow,
        notifier,
        background_tasks.add_task,
        verification_ttl=timedelta(hours=EMAIL_VERIFICATION_TTL),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyPhoneRequest(ApiModel):
    phone: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)


@router.post("/verify-phone", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def verify_phone(request: VerifyPhoneRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    use_case = VerifyPhoneUseCase(uow)
    result = await use_case.execute(request.phone, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class SendPhoneCodeRequest(ApiModel):
    phone: str = Field(..., min_length=1)


@router.post("/phone/send-code", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def send_phone_code(
    request: SendPhoneCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: AuthNotifier = Depends(get_notifier),
):
    """
    Send Phone Code

    Raises:
        - 400 Bad Request: Invalid phone number
        - 503 Service Unavailable: SMS provider failed
    """
    use_case = SendPhoneCodeUseCase(uow, notifier, code_ttl=timedelta(minutes=PHONE_CODE_TTL))
    result = await use_case.execute(request.phone)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class PhoneLoginRequest(ApiModel):
    phone: str = Field(..., min_length=1)
    verification_code: str = Field(..., min_length=1)


@router.post("/phone/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def phone_login(
    request: PhoneLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    client: ClientContext = Depends(get_client_context),
):
    """
    Phone Login - signs in, creating the account on first use

    Raises:
        - 400 Bad Request: Invalid phone number
        - 401 Unauthorized: Invalid, used or expired verification code
    """
    use_case = PhoneLoginUseCase(
        uow,
        sessions,
        placeholder_email_domain=ApplicationConfig.PHONE_PLACEHOLDER_EMAIL_DOMAIN,
    )
    result = await use_case.execute(
        PhoneLoginCommand(
            phone=request.phone, verification_code=request.verification_code, client=client
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class SocialLoginRequest(ApiModel):
    provider: SocialProvider
    code: str = Field(..., min_length=1, description="OAuth2 authorization code")
    redirect_uri: str = Field(..., min_length=1)


@router.post("/social", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def social_login(
    request: SocialLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    providers: IdentityProviderRegistry = Depends(get_identity_providers),
    client: ClientContext = Depends(get_client_context),
):
    """
    Social Login (Google, GitHub, Microsoft)

    Raises:
        - 400 Bad Request: Unsupported provider or provider returned no email
        - 401 Unauthorized: Provider rejected the code
        - 503 Service Unavailable: Provider unreachable
    """
    use_case = SocialLoginUseCase(uow, sessions, providers)
    result = await use_case.execute(
        SocialLoginCommand(
            provider=request.provider,
            code=request.code,
            redirect_uri=request.redirect_uri,
            client=client,
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class SsoLoginRequest(ApiModel):
    domain: str = Field(..., min_length=1)
    saml_response: Optional[str] = Field(None, description="Base64 SAML response")
    oidc_code: Optional[str] = Field(None, description="OIDC authorization code")


@router.post("/sso", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def sso_login(
    request: SsoLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    validators: Dict[SsoProtocol, ISsoValidator] = Depends(get_sso_validators),
    client: ClientContext = Depends(get_client_context),
):
    """
    Enterprise SSO Login (SAML / OIDC)

    Raises:
        - 404 Not Found: No SSO-enabled organization for the domain
        - 400 Bad Request: Missing credential for the organization's protocol
        - 401 Unauthorized: Credential rejected
    """
    use_case = SsoLoginUseCase(uow, sessions, validators)
    result = await use_case.execute(
        SsoLoginCommand(
            domain=request.domain,
            saml_response=request.saml_response,
            oidc_code=request.oidc_code,
            client=client,
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
