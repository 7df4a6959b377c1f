"""Permission names and the default role catalogue."""

USER_MANAGE_ALL = "user.manage.all"
USER_MANAGE_OWN = "user.manage.own"
ROLE_MANAGE_ALL = "role.manage.all"
EVENT_MANAGE_ALL = "event.manage.all"
EVENT_MANAGE_OWN = "event.manage.own"
EVENT_VIEW_ALL = "event.view.all"
EVENT_VIEW_PUBLIC = "event.view.public"
EVENT_VIEW_INVITED = "event.view.invited"
EVENT_INVITE = "event.invite"
EVENT_ATTEND = "event.attend"
EVENT_APPROVE = "event.approve"
EVENT_HOLD = "event.hold"
EVENT_REACTIVATE = "event.reactivate"
SYSTEM_CONFIG = "system.config"
HISTORY_VIEW_ALL = "history.view.all"
HISTORY_VIEW_OWN = "history.view.own"

DEFAULT_PERMISSIONS = [
    (USER_MANAGE_ALL, "Can manage all users in system"),
    (ROLE_MANAGE_ALL, "Can manage all roles in system"),
    (EVENT_MANAGE_ALL, "Can manage all events in system"),
    (EVENT_APPROVE, "Can approve pending events"),
    (EVENT_HOLD, "Can hold/pause events"),
    (EVENT_REACTIVATE, "Can reactivate held events"),
    (SYSTEM_CONFIG, "Can configure system settings"),
    (HISTORY_VIEW_ALL, "Can view all users' history (login, password, activity)"),
    (USER_MANAGE_OWN, "Can manage own users/team"),
    (EVENT_MANAGE_OWN, "Can manage own events"),
    (EVENT_VIEW_ALL, "Can view all events"),
    (EVENT_INVITE, "Can invite users to events"),
    (EVENT_VIEW_PUBLIC, "Can view public events"),
    (EVENT_VIEW_INVITED, "Can view invited events"),
    (EVENT_ATTEND, "Can attend events"),
    (HISTORY_VIEW_OWN, "Can view own history (login, password, activity)"),
]

SUPERADMIN_ROLE = "SuperAdmin"
ADMIN_ROLE = "Admin"
ATTENDEE_ROLE = "Attendee"

# None means every known permission
DEFAULT_ROLES = {
    SUPERADMIN_ROLE: {
        "description": "Full system access",
        "permissions": None,
    },
    ADMIN_ROLE: {
        "description": "Organizes own events and invites attendees",
        "permissions": [
            USER_MANAGE_OWN, EVENT_MANAGE_OWN, EVENT_VIEW_ALL, EVENT_INVITE,
            EVENT_APPROVE, HISTORY_VIEW_OWN,
        ],
    },
    ATTENDEE_ROLE: {
        "description": "Views and attends events",
        "permissions": [
            EVENT_VIEW_PUBLIC, EVENT_VIEW_INVITED, EVENT_ATTEND, HISTORY_VIEW_OWN,
        ],
    },
}
