"""Authentication and authorization decorators.

Route guards that read the context set by ``AuthMiddleware``. They never
look at the Authorization header themselves, so 401 and 403 responses are
produced in exactly one place.
"""

from functools import wraps
from typing import Callable

from flask import current_app

from ..errors import Unauthenticated
from .authorization import PermissionEvaluator
from .context import Identity, get_current_identity


def get_evaluator() -> PermissionEvaluator:
    return current_app.extensions["permission_evaluator"]


def require_identity() -> Identity:
    """Return the authenticated identity or raise ``Unauthenticated``."""
    identity = get_current_identity()
    if identity is None:
        raise Unauthenticated()
    return identity


def requires_auth(f: Callable) -> Callable:
    """Decorator that requires an authenticated caller."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        require_identity()
        return f(*args, **kwargs)

    return decorated_function


def requires_permission(*permissions: str) -> Callable:
    """Decorator that requires at least one of ``permissions``."""

    def decorator(f: Callable) -> Callable:

        @wraps(f)
        def decorated_function(*args, **kwargs):
            get_evaluator().require_permission(get_current_identity(), *permissions)
            return f(*args, **kwargs)

        return decorated_function

    return decorator
