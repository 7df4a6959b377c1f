"""Authentication middleware for Flask application.

Resolves the bearer token of every request into an ``AuthContext`` stored on
``flask.g``. It never rejects a request: every failure degrades to an
anonymous context, and protected routes produce the 401 themselves.
"""

import logging
from typing import Optional

from flask import Flask, g, request

from ..errors import TokenDecodeError
from ..repositories import UserRepository
from .context import ANONYMOUS, AuthContext, Identity
from .jwt_manager import ACCESS_TOKEN, JWTManager
from .token_registry import TokenRegistry

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header, else None."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


class AuthMiddleware:
    """Authentication middleware for automatic token processing."""

    def __init__(self, jwt_manager: JWTManager, registry: TokenRegistry,
                 session_factory, app: Optional[Flask] = None):
        self.jwt_manager = jwt_manager
        self.registry = registry
        self.session_factory = session_factory
        if app:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize middleware with Flask app."""
        app.before_request(self.before_request)

    def before_request(self):
        """Attach the resolved auth context; always lets the request continue."""
        g.auth = ANONYMOUS
        try:
            g.auth = self.authenticate(request.headers.get("Authorization"))
        except Exception as e:
            logger.error(f"Unexpected error processing bearer token: {e}", exc_info=True)
            g.auth = ANONYMOUS

    def authenticate(self, header: Optional[str]) -> AuthContext:
        token = extract_bearer_token(header)
        if token is None:
            return ANONYMOUS

        if not self.jwt_manager.verify(token, expected_type=ACCESS_TOKEN):
            logger.debug("Bearer token failed verification")
            return ANONYMOUS

        try:
            user_id = self.jwt_manager.extract_subject(token)
            token_id = self.jwt_manager.extract_token_id(token)
        except TokenDecodeError as e:
            logger.warning(f"Could not read claims of verified token: {e}")
            return ANONYMOUS

        registered_user = self.registry.resolve(token_id)
        if registered_user is None:
            logger.debug(f"Token {token_id} not in registry (logged out or expired)")
            return ANONYMOUS

        if registered_user != user_id:
            logger.error(
                f"Possible token tampering: token {token_id} subject {user_id} "
                f"!= registered user {registered_user}"
            )
            return ANONYMOUS

        identity = self._load_identity(user_id)
        if identity is None:
            return ANONYMOUS

        logger.debug(f"Authenticated user {user_id} with authorities {identity.authorities}")
        return AuthContext(identity=identity, token=token, token_id=token_id)

    def _load_identity(self, user_id: int) -> Optional[Identity]:
        session = self.session_factory()
        try:
            user = UserRepository(session).get_with_permissions(user_id)
            if user is None:
                logger.warning(f"Token subject {user_id} has no user record")
                return None
            if not user.is_active:
                logger.info(f"User {user_id} is {user.status.value}; treating request as anonymous")
                return None
            return Identity.from_user(user)
        finally:
            session.close()
