"""Error taxonomy for authentication and authorization.

Every error the HTTP layer may surface derives from ``AuthError`` and carries
its own status code and machine-readable code, so route handlers can simply
raise and let ``register_error_handlers`` render the response.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from marshmallow import ValidationError

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised at startup when security settings are unusable."""


class TokenDecodeError(Exception):
    """Raised when claims cannot be read from a bearer string."""


class AuthError(Exception):
    """Base class for errors translated into HTTP responses."""

    status_code = 400
    code = "AUTH_ERROR"
    message = "Request failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class InvalidCredentials(AuthError):
    """Wrong email or wrong password; the two are never distinguished."""

    status_code = 401
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class InvalidToken(AuthError):
    status_code = 401
    code = "INVALID_TOKEN"
    message = "Invalid or expired token"


class Unauthenticated(AuthError):
    status_code = 401
    code = "AUTHENTICATION_REQUIRED"
    message = "Authentication required"


class InsufficientPermission(AuthError):
    status_code = 403
    code = "INSUFFICIENT_PERMISSIONS"
    message = "Insufficient permissions"


class ValidationFailed(AuthError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Validation failed"


class NotFound(AuthError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Resource not found"


def register_error_handlers(app: Flask) -> None:
    """Render ``AuthError`` and marshmallow failures as JSON responses."""

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return jsonify(ValidationFailed(details=err.messages).to_dict()), 400

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify(NotFound().to_dict()), 404

    @app.errorhandler(500)
    def handle_internal_error(err):
        logger.error(f"Unhandled error: {err}")
        return jsonify({"error": "Internal server error", "code": "INTERNAL_ERROR"}), 500
