"""
Verification code lifecycle: issue and single-use consumption.
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.security import generate_secure_code, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import VerificationCode, VerificationType


class VerificationCodeService:
    """
    Issues and consumes expiring one-time codes.

    Runs inside the caller's unit of work and never commits by itself.

    Business Rules:
    - Only the SHA-256 of a code is stored
    - A used code is never accepted again (CODE_ALREADY_USED)
    - An expired code is never accepted (CODE_EXPIRED)
    - Consumption is a conditional update, so of two concurrent consumers
      exactly one succeeds
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def issue(
        self,
        code_type: VerificationType,
        ttl: timedelta,
        user_id: Optional[UUID] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        code: Optional[str] = None,
    ) -> str:
        """
        Store a new code and return its plaintext (to be delivered, never stored).

        Args:
            code_type: What the code proves
            ttl: Lifetime from now
            user_id/email/phone: Subject the code is bound to
            code: Explicit code value (e.g. a reset token); 6 digits if omitted
        """
        plain_code = code or generate_secure_code(6)
        await self.uow.verification_codes.create(
            VerificationCode(
                user_id=user_id,
                email=email,
                phone=phone,
                code_hash=hash_token(plain_code),
                type=code_type,
                expires_at=utcnow() + ttl,
            )
        )
        return plain_code

    async def consume(
        self,
        code: str,
        code_type: VerificationType,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Result[VerificationCode]:
        """
        Atomically mark a code as used and return it with its bound subject.

        Errors:
            - CODE_NOT_FOUND: No code of this type matches
            - CODE_ALREADY_USED: Consumed before (or by a concurrent request)
            - CODE_EXPIRED: Past expires_at
        """
        label = "Reset token" if code_type == VerificationType.password_reset else "Verification code"

        record = await self.uow.verification_codes.find_latest(
            hash_token(code.strip()), code_type, email=email, phone=phone
        )
        if record is None:
            return Return.err(Error("CODE_NOT_FOUND", f"Invalid {label.lower()}"))

        now = utcnow()
        if record.used_at is not None:
            return Return.err(Error("CODE_ALREADY_USED", f"{label} already used"))

        if record.expires_at <= now:
            return Return.err(Error("CODE_EXPIRED", f"{label} expired"))

        if not await self.uow.verification_codes.mark_used(record.id, now):
            return Return.err(Error("CODE_ALREADY_USED", f"{label} already used"))

        record.used_at = now
        return Return.ok(record)
