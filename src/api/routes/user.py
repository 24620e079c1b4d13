from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from src.api.error import raise_for_error
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import AuthPrincipal, SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import ApiModel, SuccessResponse, UserProfile
from src.app.use_cases.users import (
    CurrentUserResponse,
    DeactivateAccountUseCase,
    GetCurrentUserUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from src.depends import (
    get_current_user,
    get_password_hasher,
    get_session_manager,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth/user", tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def get_me(
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User

    Returns the caller's profile (never the password hash, 2FA secret or
    backup codes) and their organization membership, if any.

    Raises:
        - 401 Unauthorized: Invalid or expired token, revoked session or
          inactive account
    """
    use_case = GetCurrentUserUseCase(uow)
    result = await use_case.execute(principal.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class UpdateProfileRequest(ApiModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=1024)
    phone: Optional[str] = Field(None, max_length=32)


@router.patch("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_me(
    request: UpdateProfileRequest,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Profile - only fields present in the body are changed

    Raises:
        - 400 Bad Request: Invalid phone number
        - 409 Conflict: Phone used by another account
    """
    command = UpdateProfileCommand(**request.model_dump(exclude_unset=True))

    use_case = UpdateProfileUseCase(uow)
    result = await use_case.execute(principal.user_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class DeactivateAccountRequest(ApiModel):
    password: Optional[str] = Field(None, description="Required for password accounts")


@router.delete("/me", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def deactivate_me(
    request: Optional[DeactivateAccountRequest] = None,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sessions: SessionManager = Depends(get_session_manager),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
):
    """
    Deactivate Account

    Marks the account deleted and revokes every session.

    Raises:
        - 401 Unauthorized: Wrong password
    """
    request = request or DeactivateAccountRequest()
    use_case = DeactivateAccountUseCase(uow, sessions, hasher)
    result = await use_case.execute(principal.user_id, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
