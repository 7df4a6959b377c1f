"""Rate limiting and security headers.

Configures Flask-Limiter for the authentication endpoints and adds the
standard hardening headers to every response.
"""

import logging

from flask import Flask, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

logger = logging.getLogger(__name__)

# Bound to the application in init_security; storage and the enabled flag
# come from RATELIMIT_* app config.
limiter = Limiter(key_func=get_remote_address, headers_enabled=True)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Cache-Control': 'no-store',
}


def auth_rate_limit() -> str:
    """Limit applied to credential endpoints, e.g. ``10 per minute``."""
    return current_app.config['AUTH_RATE_LIMIT']


def init_security(app: Flask) -> Limiter:
    """Initialize rate limiting and response hardening.

    Args:
        app: Flask application instance

    Returns:
        The limiter bound to ``app``
    """
    limiter.init_app(app)

    @app.errorhandler(429)
    def rate_limit_exceeded(err):
        logger.warning(f"Rate limit exceeded: {request.remote_addr} -> {request.path}")
        return jsonify({
            'error': 'Too many requests',
            'code': 'RATE_LIMIT_EXCEEDED',
        }), 429

    @app.after_request
    def add_security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    return limiter
