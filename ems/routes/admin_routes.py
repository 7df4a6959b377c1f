"""Role and user administration endpoints."""

import logging

from flask import Blueprint, current_app, g, jsonify

from ..auth import permissions as perms
from ..auth.decorators import get_evaluator, require_identity, requires_auth, requires_permission
from ..database import get_db_session
from ..models import UserStatus
from ..repositories import RoleRepository, UserRepository
from ..validation import user_status_schema, validate_json

logger = logging.getLogger(__name__)

roles_bp = Blueprint('roles', __name__, url_prefix='/api/roles')
users_bp = Blueprint('users', __name__, url_prefix='/api/users')


@roles_bp.route('/<int:role_id>/permissions/<int:permission_id>', methods=['POST'])
@requires_permission(perms.ROLE_MANAGE_ALL)
def assign_permission(role_id: int, permission_id: int):
    """Grant a permission to a role."""
    with get_db_session() as db:
        repo = RoleRepository(db)
        role = repo.get_active_or_404(role_id)
        permission = repo.get_permission_or_404(permission_id)
        created = repo.assign_permission(role, permission)
        return jsonify({'role': role.to_dict(), 'changed': created}), 200


@roles_bp.route('/<int:role_id>/permissions/<int:permission_id>', methods=['DELETE'])
@requires_permission(perms.ROLE_MANAGE_ALL)
def remove_permission(role_id: int, permission_id: int):
    """Revoke a permission from a role."""
    with get_db_session() as db:
        repo = RoleRepository(db)
        role = repo.get_active_or_404(role_id)
        permission = repo.get_permission_or_404(permission_id)
        removed = repo.unassign_permission(role, permission)
        return jsonify({'role': role.to_dict(), 'changed': removed}), 200


@users_bp.route('/<int:user_id>/role/<int:role_id>', methods=['PUT'])
@requires_permission(perms.USER_MANAGE_ALL)
def assign_role(user_id: int, role_id: int):
    identity = require_identity()
    with get_db_session() as db:
        users = UserRepository(db)
        user = users.get_by_id_or_404(user_id)
        role = RoleRepository(db).get_active_or_404(role_id)
        user.role = role
        user = users.save(user)
        logger.info(f"User {identity.user_id} assigned role {role.name} to user {user.id}")
        return jsonify(user.to_summary()), 200


@users_bp.route('/<int:user_id>/status', methods=['PUT'])
@requires_auth
@validate_json(user_status_schema)
def update_status(user_id: int):
    """Change a user's status.

    Any status other than ACTIVE revokes every token of that user.
    """
    identity = require_identity()
    status = UserStatus(g.validated_data['status'])
    with get_db_session() as db:
        users = UserRepository(db)
        user = users.get_by_id_or_404(user_id)
        get_evaluator().require_manage(
            identity, user,
            manage_all=perms.USER_MANAGE_ALL,
            manage_own=perms.USER_MANAGE_OWN,
        )
        user.status = status
        user = users.save(user)
        logger.info(f"User {identity.user_id} set status of user {user.id} to {status.value}")
        summary = user.to_summary()

    if status != UserStatus.ACTIVE:
        current_app.extensions['auth_service'].logout_all(user_id)
    return jsonify(summary), 200
