"""Authentication and authorization package.

Token issuing and verification, the token registry, request authentication
and permission evaluation.
"""

from .auth_service import AuthService, LoginResult, RefreshResult
from .authorization import PermissionEvaluator
from .context import ANONYMOUS, AuthContext, Identity, get_auth_context, get_current_identity
from .decorators import get_evaluator, require_identity, requires_auth, requires_permission
from .jwt_manager import ACCESS_TOKEN, REFRESH_TOKEN, IssuedToken, JWTManager
from .middleware import AuthMiddleware, extract_bearer_token
from .passwords import PasswordHasher
from .token_registry import TokenRegistry

__all__ = [
    "ACCESS_TOKEN",
    "ANONYMOUS",
    "AuthContext",
    "AuthMiddleware",
    "AuthService",
    "Identity",
    "IssuedToken",
    "JWTManager",
    "LoginResult",
    "PasswordHasher",
    "PermissionEvaluator",
    "REFRESH_TOKEN",
    "RefreshResult",
    "TokenRegistry",
    "extract_bearer_token",
    "get_auth_context",
    "get_current_identity",
    "get_evaluator",
    "require_identity",
    "requires_auth",
    "requires_permission",
]
