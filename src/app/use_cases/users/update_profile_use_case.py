from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_phone, validate_phone
from src.app.use_cases.common_dtos import UserProfile, to_user_profile
from src.domain.base import DuplicateRecordError
from .dtos import UpdateProfileCommand


class UpdateProfileUseCase:
    """
    Updates name, avatar and phone of the caller.

    Business Rules:
    - Phone must be valid and not used by another account
    - Changing the phone resets phone_verified
    - Email is not editable here
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, command: UpdateProfileCommand) -> Result[UserProfile]:
        changes = command.model_dump(exclude_unset=True)

        if "phone" in changes and not changes["phone"]:
            changes["phone"] = None
        if changes.get("phone"):
            changes["phone"] = normalize_phone(changes["phone"])
            if not validate_phone(changes["phone"]):
                return Return.err(Error("INVALID_PHONE", "Invalid phone number format"))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if "phone" in changes and changes["phone"] != user.phone:
                if changes["phone"]:
                    owner = await self.uow.users.get_by_phone(changes["phone"])
                    if owner is not None and owner.id != user.id:
                        return Return.err(
                            Error("PHONE_ALREADY_EXISTS", "User with this phone already exists")
                        )
                user.phone_verified = False
            else:
                changes.pop("phone", None)

            for field, value in changes.items():
                setattr(user, field, value)

            try:
                user = await self.uow.users.update(user)
            except DuplicateRecordError:
                return Return.err(
                    Error("PHONE_ALREADY_EXISTS", "User with this phone already exists")
                )

            await record_audit(
                self.uow,
                "profile_updated",
                user_id=user.id,
                metadata={"fields": sorted(changes)},
            )
            await self.uow.commit()

            return Return.ok(to_user_profile(user))
