from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.social_account_repository import ISocialAccountRepository
from src.domain.base import DuplicateRecordError
from src.domain.entities import SocialAccount, SocialProvider


class SocialAccountRepository(ISocialAccountRepository):
    """SocialAccount repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_provider_user_id(
        self, provider: SocialProvider, provider_user_id: str
    ) -> Optional[SocialAccount]:
        stmt = select(SocialAccount).where(
            SocialAccount.provider == provider,
            SocialAccount.provider_user_id == provider_user_id,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_and_provider(
        self, user_id: UUID, provider: SocialProvider
    ) -> Optional[SocialAccount]:
        stmt = select(SocialAccount).where(
            SocialAccount.user_id == user_id,
            SocialAccount.provider == provider,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, account: SocialAccount) -> SocialAccount:
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateRecordError("Social account already linked") from exc
        await self.session.refresh(account)
        return account
