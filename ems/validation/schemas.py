"""Validation schemas for API requests using Marshmallow.

Request bodies use camelCase keys; loaded data uses snake_case.
"""

from typing import Any, Dict

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates_schema

from ..models import EventVisibility, UserStatus

VISIBILITY_VALUES = [v.value for v in EventVisibility]
STATUS_VALUES = [s.value for s in UserStatus]


class LoginSchema(Schema):
    """Schema for validating login requests."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
        error_messages={'required': 'Email is required'}
    )

    password = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=128),
        error_messages={'required': 'Password is required'}
    )

    @pre_load
    def normalize_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('email'), str):
            data = dict(data, email=data['email'].strip().lower())
        return data


class RefreshTokenSchema(Schema):
    """Schema for validating token refresh requests."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.Str(
        required=True,
        data_key='refreshToken',
        validate=validate.Length(min=1),
        error_messages={'required': 'Refresh token is required'}
    )


class ChangePasswordSchema(Schema):
    """Schema for validating password change requests."""

    class Meta:
        unknown = EXCLUDE

    old_password = fields.Str(
        required=True,
        data_key='oldPassword',
        validate=validate.Length(min=1, max=128),
        error_messages={'required': 'Current password is required'}
    )
    new_password = fields.Str(
        required=True,
        data_key='newPassword',
        validate=validate.Length(min=6, max=128, error='Password must be between {min} and {max} characters'),
        error_messages={'required': 'New password is required'}
    )
    confirm_password = fields.Str(
        required=True,
        data_key='confirmPassword',
        validate=validate.Length(min=1, max=128),
        error_messages={'required': 'Password confirmation is required'}
    )

    @validates_schema
    def validate_confirmation(self, data: Dict[str, Any], **kwargs):
        if data.get('new_password') != data.get('confirm_password'):
            raise ValidationError('Passwords do not match', field_name='confirmPassword')


class EventCreateSchema(Schema):
    """Schema for validating event creation requests."""

    title = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=200),
        error_messages={'required': 'Event title is required'}
    )
    description = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=5000))
    location = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=256))
    start_time = fields.DateTime(data_key='startTime', load_default=None, allow_none=True)
    end_time = fields.DateTime(data_key='endTime', load_default=None, allow_none=True)
    visibility = fields.Str(
        load_default=EventVisibility.PUBLIC.value,
        validate=validate.OneOf(VISIBILITY_VALUES, error='Visibility must be one of {choices}')
    )

    @validates_schema
    def validate_time_range(self, data: Dict[str, Any], **kwargs):
        """Ensure the event does not end before it starts."""
        start, end = data.get('start_time'), data.get('end_time')
        if start and end and end < start:
            raise ValidationError('End time must be after start time', field_name='endTime')


class EventUpdateSchema(EventCreateSchema):
    """Schema for validating event update requests. All fields optional."""

    title = fields.Str(validate=validate.Length(min=1, max=200))
    description = fields.Str(allow_none=True, validate=validate.Length(max=5000))
    location = fields.Str(allow_none=True, validate=validate.Length(max=256))
    start_time = fields.DateTime(data_key='startTime', allow_none=True)
    end_time = fields.DateTime(data_key='endTime', allow_none=True)
    visibility = fields.Str(
        validate=validate.OneOf(VISIBILITY_VALUES, error='Visibility must be one of {choices}')
    )


class UserStatusSchema(Schema):
    """Schema for validating user status changes."""

    status = fields.Str(
        required=True,
        validate=validate.OneOf(STATUS_VALUES, error='Status must be one of {choices}'),
        error_messages={'required': 'Status is required'}
    )


# Schema instances for reuse
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
change_password_schema = ChangePasswordSchema()
event_create_schema = EventCreateSchema()
event_update_schema = EventUpdateSchema()
user_status_schema = UserStatusSchema()
