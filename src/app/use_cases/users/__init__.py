"""
User Management Use Cases

All user-related business logic.
"""

from .dtos import CurrentUserResponse, UpdateProfileCommand
from .get_current_user_use_case import GetCurrentUserUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .deactivate_account_use_case import DeactivateAccountUseCase

__all__ = [
    "GetCurrentUserUseCase",
    "UpdateProfileUseCase",
    "DeactivateAccountUseCase",
    "UpdateProfileCommand",
    "CurrentUserResponse",
]
