from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.organization_member_repository import (
    IOrganizationMemberRepository,
)
from src.app.repositories.organization_repository import IOrganizationRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.social_account_repository import ISocialAccountRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.repositories.verification_code_repository import (
    IVerificationCodeRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sessions: ISessionRepository
    verification_codes: IVerificationCodeRepository
    social_accounts: ISocialAccountRepository
    organizations: IOrganizationRepository
    organization_members: IOrganizationMemberRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
