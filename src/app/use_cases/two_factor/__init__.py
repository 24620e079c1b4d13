"""
Two-Factor Authentication Use Cases
"""

from .dtos import TwoFactorSetupResponse
from .enable_two_factor_use_case import EnableTwoFactorUseCase
from .confirm_two_factor_use_case import ConfirmTwoFactorUseCase
from .disable_two_factor_use_case import DisableTwoFactorUseCase

__all__ = [
    "EnableTwoFactorUseCase",
    "ConfirmTwoFactorUseCase",
    "DisableTwoFactorUseCase",
    "TwoFactorSetupResponse",
]
