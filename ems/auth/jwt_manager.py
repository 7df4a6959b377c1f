"""JWT Token Manager for stateless authentication.

Creates and parses signed, time-bounded identity tokens. Each token carries
the user id as subject plus a random token identifier (``tokenUuid``) that
the token registry uses to make tokens revocable.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import jwt

from ..errors import ConfigurationError, TokenDecodeError

logger = logging.getLogger(__name__)

TOKEN_ID_CLAIM = "tokenUuid"
TOKEN_TYPE_CLAIM = "type"
ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

MIN_SECRET_BYTES = 32


@dataclass(frozen=True)
class IssuedToken:
    token: str
    token_id: str
    expires_at: float


class JWTManager:
    """HMAC signed token codec."""

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 clock: Callable[[], float] = time.time):
        if secret_key is None or len(secret_key.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes"
            )
        if not algorithm.startswith("HS"):
            raise ConfigurationError(f"Unsupported JWT algorithm: {algorithm}")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.clock = clock

    def issue(self, user_id: int, ttl_millis: int, token_type: str = ACCESS_TOKEN) -> IssuedToken:
        """Sign a new token for ``user_id`` valid for ``ttl_millis``."""
        token_id = str(uuid.uuid4())
        now = self.clock()
        issued_at = int(now)
        # Millisecond precision so sub-second lifetimes survive
        expires_at = math.floor(now * 1000 + ttl_millis) / 1000

        payload = {
            "sub": str(user_id),
            TOKEN_ID_CLAIM: token_id,
            TOKEN_TYPE_CLAIM: token_type,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

        logger.info(f"Issued {token_type} token {token_id} for user {user_id}")
        return IssuedToken(token=token, token_id=token_id, expires_at=expires_at)

    def verify(self, token: str, expected_type: Optional[str] = None) -> bool:
        """Return True if the signature is valid and the token has not expired.

        Never raises: malformed input, bad signatures and expired tokens all
        yield False.
        """
        if not token or not isinstance(token, str):
            return False
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error verifying token: {e}")
            return False

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= self.clock():
            logger.debug("Token rejected: expired")
            return False

        if expected_type is not None and payload.get(TOKEN_TYPE_CLAIM) != expected_type:
            logger.debug(f"Token rejected: expected {expected_type} token")
            return False

        return True

    def extract_claims(self, token: str) -> Dict[str, Any]:
        """Read claims without checking the signature.

        Callers must have called ``verify`` first.
        """
        try:
            return jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
                algorithms=[self.algorithm],
            )
        except jwt.InvalidTokenError as e:
            raise TokenDecodeError(f"Malformed token: {e}") from e

    def extract_subject(self, token: str) -> int:
        """Return the user id embedded in a verified token."""
        subject = self.extract_claims(token).get("sub")
        if subject is None:
            raise TokenDecodeError("Token has no subject")
        try:
            return int(subject)
        except (TypeError, ValueError) as e:
            raise TokenDecodeError(f"Token subject is not a user id: {subject!r}") from e

    def extract_token_id(self, token: str) -> str:
        """Return the token identifier embedded in a verified token."""
        token_id = self.extract_claims(token).get(TOKEN_ID_CLAIM)
        if not token_id or not isinstance(token_id, str):
            raise TokenDecodeError("Token has no token identifier")
        return token_id

    def extract_token_type(self, token: str) -> Optional[str]:
        return self.extract_claims(token).get(TOKEN_TYPE_CLAIM)
