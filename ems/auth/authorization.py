"""Permission evaluation for protected operations.

Rules are evaluated broadest first: an "all" grant always allows before any
ownership or visibility narrowing is considered.

Resources only need to expose ``owner_id``. Visibility checks additionally
read ``visibility`` and ``invitee_ids``.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..errors import InsufficientPermission, Unauthenticated
from ..models import EventVisibility
from . import permissions as perms
from .context import Identity

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Role and permission based access decisions."""

    def __init__(self,
                 view_all: Iterable[str] = (perms.EVENT_MANAGE_ALL, perms.EVENT_VIEW_ALL),
                 view_public: str = perms.EVENT_VIEW_PUBLIC,
                 view_invited: str = perms.EVENT_VIEW_INVITED):
        self.view_all = tuple(view_all)
        self.view_public = view_public
        self.view_invited = view_invited

    # -- global checks -----------------------------------------------------

    def has_permission(self, identity: Optional[Identity], permission: str) -> bool:
        if identity is None:
            return False
        return identity.has_permission(permission)

    def has_any_permission(self, identity: Optional[Identity], *permissions: str) -> bool:
        return any(self.has_permission(identity, p) for p in permissions)

    # -- ownership scoped checks -------------------------------------------

    @staticmethod
    def is_owner(identity: Optional[Identity], resource: Any) -> bool:
        if identity is None:
            return False
        owner_id = getattr(resource, "owner_id", None)
        return owner_id is not None and owner_id == identity.user_id

    def can_manage(self, identity: Optional[Identity], resource: Any,
                   manage_all: str = perms.EVENT_MANAGE_ALL,
                   manage_own: str = perms.EVENT_MANAGE_OWN) -> bool:
        """Allow with ``manage_all``, or with ``manage_own`` on an owned resource."""
        if identity is None:
            return False
        if identity.has_permission(manage_all):
            return True
        if identity.has_permission(manage_own):
            return self.is_owner(identity, resource)
        return False

    # -- visibility checks -------------------------------------------------

    def can_view(self, identity: Optional[Identity], resource: Any) -> bool:
        if identity is None:
            return False
        if any(identity.has_permission(p) for p in self.view_all):
            return True
        if self.is_owner(identity, resource):
            return True

        visibility = getattr(resource, "visibility", None)
        if visibility == EventVisibility.PUBLIC:
            return identity.has_permission(self.view_public)
        if visibility == EventVisibility.INVITE_ONLY:
            invitees = getattr(resource, "invitee_ids", None) or ()
            return identity.has_permission(self.view_invited) and identity.user_id in invitees
        # PRIVATE, or no visibility recorded
        return False

    def filter_visible(self, identity: Optional[Identity], resources: Iterable[Any]) -> List[Any]:
        return [r for r in resources if self.can_view(identity, r)]

    # -- raising variants --------------------------------------------------

    def require_permission(self, identity: Optional[Identity], *permissions: str) -> None:
        """Raise unless the identity holds at least one of ``permissions``."""
        self._require_identity(identity)
        if not self.has_any_permission(identity, *permissions):
            logger.warning(f"User {identity.user_id} lacks any of {list(permissions)}")
            raise InsufficientPermission(
                f"Insufficient privileges. Required permission: {' or '.join(permissions)}"
            )

    def require_manage(self, identity: Optional[Identity], resource: Any,
                       manage_all: str = perms.EVENT_MANAGE_ALL,
                       manage_own: str = perms.EVENT_MANAGE_OWN) -> None:
        self._require_identity(identity)
        if not self.can_manage(identity, resource, manage_all, manage_own):
            logger.warning(
                f"User {identity.user_id} denied management of "
                f"{type(resource).__name__} {getattr(resource, 'id', None)}"
            )
            raise InsufficientPermission(
                f"Access denied. Must own resource or have {manage_all}"
            )

    def require_view(self, identity: Optional[Identity], resource: Any) -> None:
        self._require_identity(identity)
        if not self.can_view(identity, resource):
            logger.warning(
                f"User {identity.user_id} denied view of "
                f"{type(resource).__name__} {getattr(resource, 'id', None)}"
            )
            raise InsufficientPermission("You don't have permission to view this resource")

    @staticmethod
    def _require_identity(identity: Optional[Identity]) -> None:
        if identity is None:
            raise Unauthenticated()
