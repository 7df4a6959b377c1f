"""Role and permission repository implementation."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models import Permission, Role, RolePermission
from .base import BaseRepository

logger = logging.getLogger(__name__)


class RoleRepository(BaseRepository[Role]):
    """Repository for roles and their permission assignments."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, Role)

    def get_active_or_404(self, role_id: int) -> Role:
        role = self.get_by_id(role_id)
        # Soft deleted roles behave as missing
        if role is None or role.deleted:
            raise NotFound(f"Role with id {role_id} not found")
        return role

    def get_permission_or_404(self, permission_id: int) -> Permission:
        permission = self.get_permission(permission_id)
        if permission is None:
            raise NotFound(f"Permission with id {permission_id} not found")
        return permission

    def get_permission(self, permission_id: int) -> Optional[Permission]:
        return self.db.get(Permission, permission_id)

    def assign_permission(self, role: Role, permission: Permission) -> bool:
        """Link a permission to a role. Returns False if already linked."""
        existing = (
            self.db.query(RolePermission)
            .filter(
                RolePermission.role_id == role.id,
                RolePermission.permission_id == permission.id,
            )
            .first()
        )
        if existing:
            return False
        self.db.add(RolePermission(role_id=role.id, permission_id=permission.id))
        self.db.commit()
        self.db.refresh(role)
        logger.info(f"Assigned permission {permission.name} to role {role.name}")
        return True

    def unassign_permission(self, role: Role, permission: Permission) -> bool:
        """Unlink a permission from a role. Returns False if it was not linked."""
        deleted = (
            self.db.query(RolePermission)
            .filter(
                RolePermission.role_id == role.id,
                RolePermission.permission_id == permission.id,
            )
            .delete()
        )
        self.db.commit()
        self.db.refresh(role)
        if deleted:
            logger.info(f"Removed permission {permission.name} from role {role.name}")
        return bool(deleted)
