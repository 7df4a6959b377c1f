"""HTTP blueprints."""

from .admin_routes import roles_bp, users_bp
from .auth_routes import auth_bp
from .event_routes import events_bp

__all__ = ['auth_bp', 'events_bp', 'roles_bp', 'users_bp']
