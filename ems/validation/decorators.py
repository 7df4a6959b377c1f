"""Request body validation decorator."""

import logging
from functools import wraps
from typing import Callable

from flask import g, request
from marshmallow import Schema, ValidationError

from ..errors import ValidationFailed

logger = logging.getLogger(__name__)


def validate_json(schema: Schema):
    """Load the JSON body with ``schema`` into ``g.validated_data``.

    Validation failures propagate as marshmallow ``ValidationError`` and are
    rendered as 400 ``VALIDATION_ERROR`` by the application error handlers.
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            json_data = request.get_json(silent=True)
            if not isinstance(json_data, dict):
                raise ValidationFailed("Request body must be a JSON object")

            try:
                g.validated_data = schema.load(json_data)
            except ValidationError as err:
                # Field names only, values may hold credentials
                logger.warning(
                    f"Validation error on {request.endpoint} from {request.remote_addr}: "
                    f"{sorted(err.messages) if isinstance(err.messages, dict) else 'body'}"
                )
                raise

            return f(*args, **kwargs)

        return decorated_function

    return decorator
