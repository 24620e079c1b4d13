"""
Random secrets and one-way token hashing.

Everything a client can present later (refresh tokens, verification codes,
reset tokens, backup codes) is stored as hash_token(value) only.
"""

import hashlib
import secrets
from typing import List


def generate_secure_token() -> str:
    """256 bits from the OS CSPRNG, hex encoded (64 chars)."""
    return secrets.token_hex(32)


def generate_secure_code(length: int = 6) -> str:
    """Numeric one-time code for email/SMS. Short-lived; not for long-term secrets."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def generate_backup_codes(count: int = 10) -> List[str]:
    return [generate_secure_code(8) for _ in range(count)]


def hash_token(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
