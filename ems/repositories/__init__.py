"""Repository pattern implementation.

Data access layer for users, roles, permissions and events.
"""

from .base import BaseRepository
from .event_repository import EventRepository
from .role_repository import RoleRepository
from .user_repository import UserRepository, normalize_email

__all__ = [
    'BaseRepository',
    'EventRepository',
    'RoleRepository',
    'UserRepository',
    'normalize_email',
]
