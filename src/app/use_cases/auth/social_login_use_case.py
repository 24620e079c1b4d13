"""
Social Login Use Case

OAuth2 authorization-code login (Google, GitHub, Microsoft).
"""

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.identity import IdentityProviderRegistry
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_email
from src.app.use_cases.common_dtos import AuthResponse
from src.domain.base import DuplicateRecordError
from src.domain.entities import SocialAccount, User, UserStatus
from .dtos import SocialLoginCommand
from .login_flow import start_session


class SocialLoginUseCase:
    """
    Business Logic:
    1. Exchange the code through the provider's adapter (no adapter ->
       UNSUPPORTED_PROVIDER)
    2. Provider must return an email (PROVIDER_EMAIL_MISSING)
    3. Resolve the user by existing (provider, provider_user_id) link, then
       by email; create a verified user if neither matches
    4. Link the provider to the user if not linked yet (idempotent)
    5. Create Session
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        providers: IdentityProviderRegistry,
    ):
        self.uow = uow
        self.sessions = sessions
        self.providers = providers

    async def execute(self, command: SocialLoginCommand) -> Result[AuthResponse]:
        provider = self.providers.get(command.provider)
        if provider is None:
            return Return.err(
                Error("UNSUPPORTED_PROVIDER", f"Unsupported provider: {command.provider.value}")
            )

        exchanged = await provider.exchange_code(command.code, command.redirect_uri)
        if exchanged.is_err():
            return exchanged

        identity = exchanged.value
        if not identity.email:
            return Return.err(
                Error("PROVIDER_EMAIL_MISSING", "Email is required from social provider")
            )
        email = normalize_email(identity.email)
        metadata = {"method": "social", "provider": command.provider.value}

        async with self.uow:
            user = None
            link = await self.uow.social_accounts.get_by_provider_user_id(
                command.provider, identity.provider_user_id
            )
            if link is not None:
                user = await self.uow.users.get_by_id(link.user_id)
            if user is None:
                user = await self.uow.users.get_by_email(email)

            if user is not None and user.status != UserStatus.active:
                return Return.err(Error("ACCOUNT_INACTIVE", "Account is not active"))

            try:
                if user is None:
                    user = await self.uow.users.create(
                        User(
                            email=email,
                            first_name=identity.first_name,
                            last_name=identity.last_name,
                            avatar_url=identity.avatar_url,
                            email_verified=True,
                        )
                    )
                    await record_audit(
                        self.uow, "user_registered", user_id=user.id, metadata=metadata
                    )

                existing = await self.uow.social_accounts.get_by_user_and_provider(
                    user.id, command.provider
                )
                if existing is None:
                    await self.uow.social_accounts.create(
                        SocialAccount(
                            user_id=user.id,
                            provider=command.provider,
                            provider_user_id=identity.provider_user_id,
                            provider_email=email,
                            provider_data=identity.raw,
                        )
                    )
            except DuplicateRecordError:
                # A concurrent login created the same user or link first
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Account is being created, try again")
                )

            response = await start_session(
                self.uow, self.sessions, user, command.client, metadata=metadata
            )

            await self.uow.commit()
            return Return.ok(response)
