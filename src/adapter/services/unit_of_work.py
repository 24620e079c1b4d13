from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.organization_member_repository import (
    OrganizationMemberRepository,
)
from src.adapter.repositories.organization_repository import OrganizationRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.social_account_repository import SocialAccountRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.repositories.verification_code_repository import (
    VerificationCodeRepository,
)
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.verification_codes = VerificationCodeRepository(self.session)
        self.social_accounts = SocialAccountRepository(self.session)
        self.organizations = OrganizationRepository(self.session)
        self.organization_members = OrganizationMemberRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
