from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt


class TokenService:
    """
    Signed bearer tokens (JWT, HS256 by default).

    Claims: user_id, sid (session id), iat, exp.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=24),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl

    def issue(
        self, user_id: UUID, session_id: UUID, ttl: Optional[timedelta] = None
    ) -> str:
        """
        Generate JWT access token

        Args:
            user_id: User UUID
            session_id: Session the token belongs to
            ttl: Lifetime override (defaults to access_ttl)

        Returns:
            JWT token string
        """
        now = datetime.now(UTC)
        payload = {
            "user_id": str(user_id),
            "sid": str(session_id),
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.access_ttl),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[dict]:
        """
        Verify signature, then expiry, and decode the claims.

        Returns:
            Decoded payload dict or None if invalid or expired
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
        except JWTError:
            return None
