"""
TOTP (RFC 6238) for two-factor authentication.

6 digits, 30-second steps, HMAC-SHA1, base32 secrets. This is what standard
authenticator apps (Google Authenticator, Authy, 1Password) expect.
"""

from datetime import datetime
from typing import Optional, Union

import pyotp

DIGITS = 6
INTERVAL = 30
VALID_WINDOW = 1  # accept one step before and after the current one


class TotpService:
    def __init__(self, issuer: str):
        self.issuer = issuer

    def generate_secret(self) -> str:
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, account_name: str) -> str:
        """otpauth:// URI for the QR code shown during setup."""
        return pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL).provisioning_uri(
            name=account_name, issuer_name=self.issuer
        )

    def code_at(self, secret: str, for_time: Union[int, datetime]) -> str:
        return pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL).at(for_time)

    def verify(
        self,
        secret: Optional[str],
        code: Optional[str],
        for_time: Optional[Union[int, datetime]] = None,
    ) -> bool:
        if not secret or not code:
            return False

        code = code.strip().replace(" ", "")
        if len(code) != DIGITS or not code.isdigit():
            return False

        try:
            return pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL).verify(
                code, for_time=for_time, valid_window=VALID_WINDOW
            )
        except ValueError:
            # Corrupt (non-base32) secret
            return False
