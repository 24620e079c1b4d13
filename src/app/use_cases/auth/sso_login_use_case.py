"""
SSO Login Use Case

Enterprise sign-in through an organization's SAML or OIDC identity provider.
"""

from typing import Dict

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.identity import ISsoValidator
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_email
from src.app.use_cases.common_dtos import AuthResponse
from src.domain.base import DuplicateRecordError
from src.domain.entities import (
    OrganizationMember,
    OrganizationRole,
    SsoProtocol,
    User,
    UserStatus,
)
from .dtos import SsoLoginCommand
from .login_flow import start_session


class SsoLoginUseCase:
    """
    Business Logic:
    1. Resolve the organization by domain; SSO must be enabled
       (SSO_NOT_CONFIGURED)
    2. Validate the credential matching the organization's protocol
       (saml_response for SAML, oidc_code for OIDC)
    3. The asserted email must belong to the organization's domain
       (SSO_DOMAIN_MISMATCH)
    4. Find or create the user by email (created users are email-verified)
    5. Ensure an OrganizationMember row exists (role=member)
    6. Create Session
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        validators: Dict[SsoProtocol, ISsoValidator],
    ):
        self.uow = uow
        self.sessions = sessions
        self.validators = validators

    async def execute(self, command: SsoLoginCommand) -> Result[AuthResponse]:
        domain = command.domain.strip().lower()
        metadata = {"method": "sso", "domain": domain}

        async with self.uow:
            organization = await self.uow.organizations.get_sso_enabled_by_domain(domain)
            if organization is None:
                return Return.err(
                    Error("SSO_NOT_CONFIGURED", "SSO not configured for this domain")
                )
            organization_id = organization.id
            organization_domain = organization.domain.lower()
            protocol = organization.sso_provider
            sso_config = dict(organization.sso_config or {})

        credentials = {
            SsoProtocol.saml: (command.saml_response, "samlResponse"),
            SsoProtocol.oidc: (command.oidc_code, "oidcCode"),
        }
        validator = self.validators.get(protocol)
        if validator is None or protocol not in credentials:
            return Return.err(Error("UNSUPPORTED_SSO_PROVIDER", "Unsupported SSO provider"))

        credential, field = credentials[protocol]
        if not credential:
            return Return.err(Error("MISSING_FIELD", f"{field} is required"))

        validated = await validator.validate(credential, sso_config)
        if validated.is_err():
            return validated

        identity = validated.value
        if not identity.email:
            return Return.err(
                Error("PROVIDER_EMAIL_MISSING", "Email is required from SSO provider")
            )
        email = normalize_email(identity.email)
        if email.rsplit("@", 1)[-1] != organization_domain:
            return Return.err(
                Error("SSO_DOMAIN_MISMATCH", "Email does not belong to the organization domain")
            )

        async with self.uow:
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

                membership = await self.uow.organization_members.get_by_organization_and_user(
                    organization_id, user.id
                )
                if membership is None:
                    await self.uow.organization_members.create(
                        OrganizationMember(
                            organization_id=organization_id,
                            user_id=user.id,
                            role=OrganizationRole.member,
                        )
                    )
            except DuplicateRecordError:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Account is being created, try again")
                )

            response = await start_session(
                self.uow, self.sessions, user, command.client, metadata=metadata
            )

            await self.uow.commit()
            return Return.ok(response)
