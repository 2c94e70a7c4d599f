"""Issuing and validating signed session tokens."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from accounts_api.domain.errors import InvalidToken

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    user_id: int
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenService:
    """Creates HS256 JWTs carrying the user id and checks them on the way back in."""

    def __init__(
        self,
        secret_key: str,
        expiration_hours: int = 23,
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        if secret_key == DEFAULT_SECRET:
            logger.warning("JWT_SECRET is using the default value. Configure a real secret in production.")
        self._secret_key = secret_key
        self._ttl = timedelta(hours=expiration_hours)
        self._algorithm = algorithm

    def issue(self, user_id: int, ttl: Optional[timedelta] = None) -> str:
        """
        Create a session token for ``user_id``.

        Args:
            user_id: Identifier stored in the ``id`` claim
            ttl: Lifetime of the token, defaults to the configured expiration

        Returns:
            Encoded JWT string
        """
        now = datetime.now(tz=timezone.utc)
        payload = {
            "id": user_id,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self._ttl),
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a session token.

        Raises:
            InvalidToken: If the signature, expiry or claims do not check out
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["id", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("token invalid") from exc

        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidToken("token id claim is not an integer")

        return TokenClaims(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(payload.get("iat", payload["exp"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token_id=str(payload.get("jti", "")),
        )
