from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import VerificationCode, VerificationType


class IVerificationCodeRepository(ABC):
    """VerificationCode repository interface - application layer"""

    @abstractmethod
    async def create(self, code: VerificationCode) -> VerificationCode:
        """Create a new verification code"""
        pass

    @abstractmethod
    async def find_latest(
        self,
        code_hash: str,
        code_type: VerificationType,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[VerificationCode]:
        """Most recently issued code matching hash and type (and email/phone if given)"""
        pass

    @abstractmethod
    async def mark_used(self, code_id: UUID, now: datetime) -> bool:
        """
        Set used_at if the code is still unused and unexpired.

        Returns True for exactly one of any number of concurrent callers.
        """
        pass
