from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from src.api.error import raise_for_error
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import AuthPrincipal
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import ApiModel, SuccessResponse
from src.app.use_cases.two_factor import (
    ConfirmTwoFactorUseCase,
    DisableTwoFactorUseCase,
    EnableTwoFactorUseCase,
    TwoFactorSetupResponse,
)
from src.depends import get_current_user, get_password_hasher, get_totp_service, get_unit_of_work

router = APIRouter(prefix="/auth/2fa", tags=["Two-Factor"])


class EnableTwoFactorRequest(ApiModel):
    password: str = Field(..., description="Current password")


@router.post("/enable", status_code=status.HTTP_200_OK, response_model=TwoFactorSetupResponse)
async def enable_two_factor(
    request: EnableTwoFactorRequest,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
    totp: TotpService = Depends(get_totp_service),
):
    """
    Start 2FA setup

    Returns the TOTP secret, an otpauth:// URI for the QR code and ten
    one-time backup codes. 2FA is not active until /auth/2fa/confirm.

    Raises:
        - 401 Unauthorized: Wrong password
        - 409 Conflict: 2FA already enabled
    """
    use_case = EnableTwoFactorUseCase(uow, hasher, totp)
    result = await use_case.execute(principal.user_id, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ConfirmTwoFactorRequest(ApiModel):
    code: str = Field(..., min_length=1, description="Current TOTP code")
    # Accepted for client compatibility; the secret stored by /enable is used
    secret: Optional[str] = None


@router.post("/confirm", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def confirm_two_factor(
    request: ConfirmTwoFactorRequest,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    totp: TotpService = Depends(get_totp_service),
):
    """
    Confirm 2FA setup

    Raises:
        - 400 Bad Request: Setup not started
        - 401 Unauthorized: Invalid code
        - 409 Conflict: 2FA already enabled
    """
    use_case = ConfirmTwoFactorUseCase(uow, totp)
    result = await use_case.execute(principal.user_id, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class DisableTwoFactorRequest(ApiModel):
    password: str = Field(..., description="Current password")
    code: str = Field(..., min_length=1, description="Current TOTP code")


@router.post("/disable", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def disable_two_factor(
    request: DisableTwoFactorRequest,
    principal: AuthPrincipal = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
    totp: TotpService = Depends(get_totp_service),
):
    """
    Disable 2FA - requires both the password and a TOTP code

    Raises:
        - 400 Bad Request: 2FA not enabled
        - 401 Unauthorized: Wrong password or invalid code
    """
    use_case = DisableTwoFactorUseCase(uow, hasher, totp)
    result = await use_case.execute(principal.user_id, request.password, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
