from datetime import timedelta
from typing import Dict, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.identity.oauth_providers import (
    GitHubIdentityProvider,
    GoogleIdentityProvider,
    MicrosoftIdentityProvider,
)
from src.adapter.identity.sso_validators import OidcCodeValidator, SamlAssertionValidator
from src.adapter.services.email_sender import ConsoleEmailSender, ResendEmailSender
from src.adapter.services.sms_sender import ConsoleSmsSender, TwilioSmsSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.identity import IdentityProviderRegistry, ISsoValidator
from src.app.services.notifications import AuthNotifier
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import AuthPrincipal, SessionManager
from src.app.services.token_service import TokenService
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SocialProvider, SsoProtocol

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

SESSION_COOKIE = "session"

# Stateless services, built once from config
password_hasher = Argon2PasswordHasher()
token_service = TokenService(
    ApplicationConfig.JWT_SECRET,
    algorithm=ApplicationConfig.JWT_ALGORITHM,
    access_ttl=timedelta(hours=ApplicationConfig.ACCESS_TOKEN_TTL_HOURS),
)
totp_service = TotpService(ApplicationConfig.TOTP_ISSUER)


def build_notifier(config=ApplicationConfig) -> AuthNotifier:
    """Real providers when credentials are configured, console senders otherwise."""
    if config.RESEND_API_KEY:
        email_sender = ResendEmailSender(
            config.RESEND_API_KEY,
            config.EMAIL_FROM_ADDRESS,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
    else:
        email_sender = ConsoleEmailSender()

    if config.TWILIO_ACCOUNT_SID and config.TWILIO_AUTH_TOKEN:
        sms_sender = TwilioSmsSender(
            config.TWILIO_ACCOUNT_SID,
            config.TWILIO_AUTH_TOKEN,
            config.TWILIO_PHONE_NUMBER,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
    else:
        sms_sender = ConsoleSmsSender()

    return AuthNotifier(email_sender, sms_sender, config.APP_BASE_URL)


def build_identity_providers(config=ApplicationConfig) -> IdentityProviderRegistry:
    """Only providers with a configured client id are offered."""
    providers = {}
    timeout = config.HTTP_TIMEOUT_SECONDS
    if config.GOOGLE_CLIENT_ID:
        providers[SocialProvider.google] = GoogleIdentityProvider(
            config.GOOGLE_CLIENT_ID, config.GOOGLE_CLIENT_SECRET, timeout=timeout
        )
    if config.GITHUB_CLIENT_ID:
        providers[SocialProvider.github] = GitHubIdentityProvider(
            config.GITHUB_CLIENT_ID, config.GITHUB_CLIENT_SECRET, timeout=timeout
        )
    if config.MICROSOFT_CLIENT_ID:
        providers[SocialProvider.microsoft] = MicrosoftIdentityProvider(
            config.MICROSOFT_CLIENT_ID, config.MICROSOFT_CLIENT_SECRET, timeout=timeout
        )
    return IdentityProviderRegistry(providers)


notifier = build_notifier()
identity_providers = build_identity_providers()
sso_validators = {
    SsoProtocol.saml: SamlAssertionValidator(),
    SsoProtocol.oidc: OidcCodeValidator(timeout=ApplicationConfig.HTTP_TIMEOUT_SECONDS),
}


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher() -> Argon2PasswordHasher:
    return password_hasher


def get_token_service() -> TokenService:
    return token_service


def get_totp_service() -> TotpService:
    return totp_service


def get_notifier() -> AuthNotifier:
    return notifier


def get_identity_providers() -> IdentityProviderRegistry:
    return identity_providers


def get_sso_validators() -> Dict[SsoProtocol, ISsoValidator]:
    return sso_validators


def get_session_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenService = Depends(get_token_service),
) -> SessionManager:
    return SessionManager(
        uow,
        tokens,
        session_ttl=timedelta(hours=ApplicationConfig.SESSION_TTL_HOURS),
        remember_me_ttl=timedelta(days=ApplicationConfig.REMEMBER_ME_TTL_DAYS),
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthPrincipal:
    """
    Dependency resolving the caller from the bearer token.

    Falls back to the "session" cookie when no Authorization header is sent.

    Returns:
        AuthPrincipal of an active user with a live session

    Raises:
        ClientError: 401 if the token is missing, invalid, expired, its
            session was revoked or the account is no longer active
    """
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    if not token:
        raise ClientError(
            Error("INVALID_TOKEN", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    async with uow:
        result = await sessions.validate_session(token)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    return result.value
