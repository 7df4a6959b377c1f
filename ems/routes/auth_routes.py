"""Authentication API endpoints.

Login, token refresh, logout, password change and the current identity.
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from ..auth.auth_service import AuthService
from ..auth.decorators import require_identity, requires_auth
from ..auth.middleware import extract_bearer_token
from ..errors import Unauthenticated
from ..security import auth_rate_limit, limiter
from ..validation import change_password_schema, login_schema, refresh_token_schema, validate_json

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def get_auth_service() -> AuthService:
    return current_app.extensions['auth_service']


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(auth_rate_limit)
@validate_json(login_schema)
def login():
    """User login endpoint.

    Unknown email and wrong password produce the same 401 response.
    """
    data = g.validated_data
    result = get_auth_service().login(data['email'], data['password'])
    return jsonify(result.to_dict()), 200


@auth_bp.route('/refresh', methods=['POST'])
@limiter.limit(auth_rate_limit)
@validate_json(refresh_token_schema)
def refresh():
    """Exchange a refresh token for a new access token."""
    result = get_auth_service().refresh(g.validated_data['refresh_token'])
    return jsonify(result.to_dict()), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Revoke the access token presented in the Authorization header."""
    token = extract_bearer_token(request.headers.get('Authorization'))
    if token is None:
        raise Unauthenticated()

    get_auth_service().logout(token)
    return jsonify({'message': 'Logout successful'}), 200


@auth_bp.route('/logout-all', methods=['POST'])
@requires_auth
def logout_all():
    """Revoke every token of the current user."""
    identity = require_identity()
    revoked = get_auth_service().logout_all(identity.user_id)
    return jsonify({'message': 'Logged out from all sessions', 'revoked': revoked}), 200


@auth_bp.route('/change-password', methods=['POST'])
@requires_auth
@limiter.limit(auth_rate_limit)
@validate_json(change_password_schema)
def change_password():
    """Change the current user's password.

    Every token of the user is revoked, including the one used here.
    """
    identity = require_identity()
    data = g.validated_data
    revoked = get_auth_service().change_password(
        identity.user_id, data['old_password'], data['new_password']
    )
    return jsonify({'message': 'Password changed, please log in again', 'revoked': revoked}), 200


@auth_bp.route('/me', methods=['GET'])
@requires_auth
def me():
    return jsonify(require_identity().to_dict()), 200
