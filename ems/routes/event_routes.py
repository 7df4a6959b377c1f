"""Event API endpoints.

Every handler checks permissions against the loaded event, so ownership and
visibility rules apply per resource rather than per route.
"""

import logging

from flask import Blueprint, g, jsonify

from ..auth import permissions as perms
from ..auth.decorators import get_evaluator, require_identity, requires_auth, requires_permission
from ..database import get_db_session
from ..models import EventVisibility
from ..repositories import EventRepository, UserRepository
from ..validation import event_create_schema, event_update_schema, validate_json

logger = logging.getLogger(__name__)

events_bp = Blueprint('events', __name__, url_prefix='/api/events')

UPDATABLE_FIELDS = ('title', 'description', 'location', 'start_time', 'end_time')


@events_bp.route('', methods=['GET'])
@requires_auth
def list_events():
    """List the events the caller may view."""
    identity = require_identity()
    with get_db_session() as db:
        events = EventRepository(db).list_active()
        visible = get_evaluator().filter_visible(identity, events)
        return jsonify({'events': [e.to_dict() for e in visible]}), 200


@events_bp.route('', methods=['POST'])
@requires_permission(perms.EVENT_MANAGE_OWN, perms.EVENT_MANAGE_ALL)
@validate_json(event_create_schema)
def create_event():
    identity = require_identity()
    data = g.validated_data
    with get_db_session() as db:
        event = EventRepository(db).create(
            title=data['title'],
            description=data['description'],
            location=data['location'],
            start_time=data['start_time'],
            end_time=data['end_time'],
            visibility=EventVisibility(data['visibility']),
            organizer_id=identity.user_id,
        )
        return jsonify(event.to_dict()), 201


@events_bp.route('/<int:event_id>', methods=['GET'])
@requires_auth
def get_event(event_id: int):
    identity = require_identity()
    with get_db_session() as db:
        event = EventRepository(db).get_active_or_404(event_id)
        get_evaluator().require_view(identity, event)
        return jsonify(event.to_dict()), 200


@events_bp.route('/<int:event_id>', methods=['PUT'])
@requires_auth
@validate_json(event_update_schema)
def update_event(event_id: int):
    identity = require_identity()
    data = g.validated_data
    with get_db_session() as db:
        repo = EventRepository(db)
        event = repo.get_active_or_404(event_id)
        get_evaluator().require_manage(identity, event)

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(event, field, data[field])
        if 'visibility' in data:
            event.visibility = EventVisibility(data['visibility'])

        event = repo.save(event)
        logger.info(f"User {identity.user_id} updated event {event.id}")
        return jsonify(event.to_dict()), 200


@events_bp.route('/<int:event_id>', methods=['DELETE'])
@requires_auth
def delete_event(event_id: int):
    identity = require_identity()
    with get_db_session() as db:
        repo = EventRepository(db)
        event = repo.get_active_or_404(event_id)
        get_evaluator().require_manage(identity, event)
        repo.soft_delete(event)
        return jsonify({'message': 'Event deleted'}), 200


@events_bp.route('/<int:event_id>/attend', methods=['POST'])
@requires_permission(perms.EVENT_ATTEND)
def attend_event(event_id: int):
    """Register the caller as an attendee of a visible event."""
    identity = require_identity()
    with get_db_session() as db:
        repo = EventRepository(db)
        event = repo.get_active_or_404(event_id)
        get_evaluator().require_view(identity, event)

        if identity.user_id not in event.invitee_ids:
            user = UserRepository(db).get_by_id_or_404(identity.user_id)
            event.attendees.append(user)
            event = repo.save(event)
            logger.info(f"User {identity.user_id} attending event {event.id}")
        return jsonify(event.to_dict()), 200


@events_bp.route('/<int:event_id>/invitees/<int:user_id>', methods=['POST'])
@requires_permission(perms.EVENT_INVITE)
def invite_user(event_id: int, user_id: int):
    """Invite a user to an event the caller manages."""
    identity = require_identity()
    with get_db_session() as db:
        repo = EventRepository(db)
        event = repo.get_active_or_404(event_id)
        get_evaluator().require_manage(identity, event)

        invitee = UserRepository(db).get_by_id_or_404(user_id)
        if invitee.id not in event.invitee_ids:
            event.attendees.append(invitee)
            event = repo.save(event)
            logger.info(f"User {identity.user_id} invited user {invitee.id} to event {event.id}")
        return jsonify(event.to_dict()), 200
