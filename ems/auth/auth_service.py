"""Authentication service for login, token refresh, logout and password change.

Orchestrates the password hasher, the JWT codec and the token registry.
Only user ids and token identifiers are ever logged, never passwords or
bearer strings.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..errors import InvalidCredentials, InvalidToken, TokenDecodeError
from ..repositories import UserRepository
from .jwt_manager import ACCESS_TOKEN, REFRESH_TOKEN, JWTManager
from .passwords import PasswordHasher
from .token_registry import TokenRegistry

logger = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    expires_in: int
    user: Dict[str, Any]
    token_type: str = TOKEN_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenType": self.token_type,
            "expiresIn": self.expires_in,
            "user": self.user,
        }


@dataclass(frozen=True)
class RefreshResult:
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = TOKEN_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenType": self.token_type,
            "expiresIn": self.expires_in,
        }


class AuthService:
    """Authentication service backed by the token registry."""

    def __init__(self, session_factory, jwt_manager: JWTManager, registry: TokenRegistry,
                 hasher: PasswordHasher, access_ttl_ms: int, refresh_ttl_ms: int):
        self.session_factory = session_factory
        self.jwt_manager = jwt_manager
        self.registry = registry
        self.hasher = hasher
        self.access_ttl_ms = access_ttl_ms
        self.refresh_ttl_ms = refresh_ttl_ms

    @property
    def access_ttl_seconds(self) -> int:
        return self.access_ttl_ms // 1000

    def login(self, email: str, password: str) -> LoginResult:
        """Verify credentials and issue an access/refresh token pair.

        Raises:
            InvalidCredentials: unknown email, wrong password or inactive account
        """
        session = self.session_factory()
        try:
            user = UserRepository(session).get_by_email(email)
            if user is None:
                self.hasher.dummy_verify()
                logger.warning("Login failed: unknown account")
                raise InvalidCredentials()

            if not self.hasher.verify(password, user.hashed_password):
                logger.warning(f"Login failed: bad password for user {user.id}")
                raise InvalidCredentials()

            if not user.is_active:
                logger.warning(f"Login failed: user {user.id} is {user.status.value}")
                raise InvalidCredentials()

            user_id = user.id
            summary = user.to_summary()
        finally:
            session.close()

        access = self.jwt_manager.issue(user_id, self.access_ttl_ms, ACCESS_TOKEN)
        refresh = self.jwt_manager.issue(user_id, self.refresh_ttl_ms, REFRESH_TOKEN)
        # Both identifiers must be resolvable before the client sees the tokens
        self.registry.put(access.token_id, user_id, self.access_ttl_ms)
        self.registry.put(refresh.token_id, user_id, self.refresh_ttl_ms)

        logger.info(f"User {user_id} logged in (access {access.token_id}, refresh {refresh.token_id})")
        return LoginResult(
            access_token=access.token,
            refresh_token=refresh.token,
            expires_in=self.access_ttl_seconds,
            user=summary,
        )

    def refresh(self, refresh_token: str) -> RefreshResult:
        """Issue a new access token for a live refresh token.

        The refresh token itself is returned unchanged.

        Raises:
            InvalidToken: the token is not a valid, registered refresh token
        """
        user_id, token_id = self._resolve(refresh_token, REFRESH_TOKEN)

        access = self.jwt_manager.issue(user_id, self.access_ttl_ms, ACCESS_TOKEN)
        self.registry.put(access.token_id, user_id, self.access_ttl_ms)

        logger.info(f"User {user_id} refreshed token {token_id} -> {access.token_id}")
        return RefreshResult(
            access_token=access.token,
            refresh_token=refresh_token,
            expires_in=self.access_ttl_seconds,
        )

    def logout(self, access_token: str) -> int:
        """Revoke the presented access token. Returns the user id.

        Only this token's identifier is revoked; a companion refresh token
        stays live. A token that was already logged out no longer resolves,
        so a second logout fails.

        Raises:
            InvalidToken: the token is not a live, registered access token
        """
        user_id, token_id = self._resolve(access_token, ACCESS_TOKEN)
        self.registry.revoke(token_id)
        logger.info(f"User {user_id} logged out token {token_id}")
        return user_id

    def logout_all(self, user_id: int) -> int:
        """Revoke every registered token of ``user_id``."""
        count = self.registry.revoke_user(user_id)
        logger.info(f"User {user_id} logged out everywhere ({count} tokens)")
        return count

    def change_password(self, user_id: int, old_password: str, new_password: str) -> int:
        """Replace the password of ``user_id`` and revoke all of their tokens.

        Returns the number of revoked tokens; the caller has to log in again.

        Raises:
            InvalidCredentials: ``old_password`` does not match
            NotFound: no such user
        """
        session = self.session_factory()
        try:
            users = UserRepository(session)
            user = users.get_by_id_or_404(user_id)
            if not self.hasher.verify(old_password, user.hashed_password):
                logger.warning(f"Password change failed: bad current password for user {user_id}")
                raise InvalidCredentials("Current password is incorrect")

            user.hashed_password = self.hasher.hash(new_password)
            users.save(user)
        finally:
            session.close()

        revoked = self.registry.revoke_user(user_id)
        logger.info(f"User {user_id} changed password, {revoked} tokens revoked")
        return revoked

    def _decode(self, token: str, token_type: str):
        if not self.jwt_manager.verify(token, expected_type=token_type):
            raise InvalidToken()
        try:
            user_id = self.jwt_manager.extract_subject(token)
            token_id = self.jwt_manager.extract_token_id(token)
        except TokenDecodeError as e:
            logger.warning(f"Verified {token_type} token could not be decoded: {e}")
            raise InvalidToken() from e
        return user_id, token_id

    def _resolve(self, token: str, token_type: str):
        user_id, token_id = self._decode(token, token_type)
        registered_user = self.registry.resolve(token_id)
        if registered_user is None:
            logger.info(f"{token_type.capitalize()} token {token_id} not in registry")
            raise InvalidToken()
        if registered_user != user_id:
            logger.error(
                f"Consistency check failed for token {token_id}: "
                f"subject {user_id} != registered {registered_user}"
            )
            raise InvalidToken()
        return user_id, token_id
