"""
Get Current User Use Case

Loads the authenticated user's sanitized profile.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import to_user_profile
from .dtos import CurrentUserResponse


class GetCurrentUserUseCase:
    """
    Use case for reading the caller's own profile.

    Business Rules:
    - Never returns password hash, 2FA secret or backup codes
    - organization_id/role come from the user's first organization membership
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[CurrentUserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            membership = await self.uow.organization_members.get_first_by_user_id(user.id)

            return Return.ok(
                CurrentUserResponse(
                    **to_user_profile(user).model_dump(),
                    organization_id=str(membership.organization_id) if membership else None,
                    role=membership.role.value if membership else None,
                )
            )
