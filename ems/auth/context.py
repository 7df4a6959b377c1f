"""Per-request authentication context."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from flask import g

ROLE_PREFIX = "ROLE_"


@dataclass(frozen=True)
class Identity:
    """Resolved identity of an authenticated caller."""

    user_id: int
    email: str
    full_name: Optional[str]
    role: Optional[str]
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def authorities(self) -> list:
        """One role authority followed by one authority per permission."""
        role_authority = [f"{ROLE_PREFIX}{self.role}"] if self.role else []
        return role_authority + sorted(self.permissions)

    @classmethod
    def from_user(cls, user) -> "Identity":
        """Snapshot a loaded ``User`` so no ORM object outlives its session."""
        role = user.role if user.role is not None and not user.role.deleted else None
        return cls(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=role.name if role is not None else None,
            permissions=frozenset(user.permission_names()),
        )

    def has_permission(self, name: str) -> bool:
        return name in self.permissions

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role,
            "authorities": self.authorities,
        }


@dataclass(frozen=True)
class AuthContext:
    identity: Optional[Identity] = None
    token: Optional[str] = None
    token_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


ANONYMOUS = AuthContext()


def get_auth_context() -> AuthContext:
    """Context stored by the middleware, anonymous if it never ran."""
    return getattr(g, "auth", ANONYMOUS)


def get_current_identity() -> Optional[Identity]:
    return get_auth_context().identity
