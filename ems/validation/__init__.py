"""Request validation schemas."""

from .decorators import validate_json
from .schemas import (
    change_password_schema,
    event_create_schema,
    event_update_schema,
    login_schema,
    refresh_token_schema,
    user_status_schema,
)

__all__ = [
    'change_password_schema',
    'event_create_schema',
    'event_update_schema',
    'login_schema',
    'refresh_token_schema',
    'user_status_schema',
    'validate_json',
]
