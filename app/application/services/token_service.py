import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from ...exceptions import ConfigurationError
from ...utils import utcnow

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Signature, expiry or claim check failed."""


@dataclass(frozen=True)
class SessionClaim:
    user_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass
class TokenService:
    secret_key: str
    algorithm: str = "HS256"
    expire_days: int = 7
    clock: Callable[[], datetime] = field(default=utcnow)

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ConfigurationError("JWT_SECRET_KEY must be configured")

    def issue(self, user_id: int) -> str:
        """Create a signed bearer token for user_id, valid for expire_days."""
        issued_at = self.clock()
        payload = {
            "sub": str(user_id),
            "userId": user_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaim:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.warning("Token has expired")
            raise InvalidTokenError("expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT error: {e}")
            raise InvalidTokenError(str(e)) from e

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("malformed subject") from e

        return SessionClaim(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
