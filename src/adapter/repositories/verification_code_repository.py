from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.verification_code_repository import IVerificationCodeRepository
from src.domain.entities import VerificationCode, VerificationType


class VerificationCodeRepository(IVerificationCodeRepository):
    """VerificationCode repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, code: VerificationCode) -> VerificationCode:
        """Create a new verification code"""
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def find_latest(
        self,
        code_hash: str,
        code_type: VerificationType,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[VerificationCode]:
        """Most recently issued matching code"""
        stmt = select(VerificationCode).where(
            VerificationCode.code_hash == code_hash,
            VerificationCode.type == code_type,
        )
        if email is not None:
            stmt = stmt.where(VerificationCode.email == email)
        if phone is not None:
            stmt = stmt.where(VerificationCode.phone == phone)
        stmt = stmt.order_by(VerificationCode.created_at.desc()).limit(1)
        result = await self.session.exec(stmt)
        return result.first()

    async def mark_used(self, code_id: UUID, now: datetime) -> bool:
        """Compare-and-set used_at; only the first caller sees True"""
        stmt = (
            update(VerificationCode)
            .where(
                VerificationCode.id == code_id,
                VerificationCode.used_at.is_(None),
                VerificationCode.expires_at > now,
            )
            .values(used_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
