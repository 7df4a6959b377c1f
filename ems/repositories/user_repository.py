"""User repository implementation.

Handles database access for users, including the role and permission
graph needed to build an authenticated identity.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ..models import Role, RolePermission, User
from .base import BaseRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up trimmed and lowercased."""
    return (email or "").strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User model with authentication features."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by normalized email."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_with_permissions(self, user_id: int) -> Optional[User]:
        """Get user with role and permissions eagerly loaded.

        Args:
            user_id: User ID

        Returns:
            User instance with role graph loaded, None if not found
        """
        return (
            self.db.query(User)
            .options(
                joinedload(User.role)
                .joinedload(Role.permissions)
                .joinedload(RolePermission.permission)
            )
            .filter(User.id == user_id)
            .first()
        )
