"""
Password hashing with Argon2id.

Stored values are argon2 PHC strings ("$argon2id$v=19$m=...,t=...,p=...$salt$key"),
so cost parameters and salt travel with every hash.
"""

import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

TIME_COST = 3
MEMORY_COST_KIB = 65536
PARALLELISM = 4
HASH_BYTES = 32
SALT_BYTES = 16


class Argon2PasswordHasher:
    """
    Salted, memory-hard password hashing.

    Business Rules:
    - Fresh 16-byte random salt per hash
    - Mismatches and malformed stored hashes verify as False, never raise
    - Hashes created with other cost parameters still verify
    - verify_dummy() spends the same work for unknown accounts so login
      latency does not reveal whether an email is registered
    """

    def __init__(
        self,
        time_cost: int = TIME_COST,
        memory_cost: int = MEMORY_COST_KIB,
        parallelism: int = PARALLELISM,
    ):
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=HASH_BYTES,
            salt_len=SALT_BYTES,
            type=Type.ID,
        )
        self._dummy_hash = self.hash(secrets.token_hex(16))

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not isinstance(password_hash, str) or not password_hash:
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def verify_dummy(self, password: str) -> bool:
        self.verify(password, self._dummy_hash)
        return False
