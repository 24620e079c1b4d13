from typing import List

from src.app.use_cases.common_dtos import ApiModel


class TwoFactorSetupResponse(ApiModel):
    """
    Returned once by 2FA enable.

    backup_codes are shown in plaintext here only; the account keeps their hashes.
    """

    secret: str
    qr_code_url: str
    backup_codes: List[str]
