from __future__ import annotations

import datetime
import enum
from typing import Set

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    HELD = "HELD"


class EventVisibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    INVITE_ONLY = "INVITE_ONLY"


event_attendees = Table(
    "event_attendees",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)


# ==========================
# AUTHENTICATION & RBAC MODELS
# ==========================

class User(Base):
    """User model with a single assigned role."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(256), nullable=True)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.ACTIVE)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    # Relationships
    role = relationship("Role", back_populates="users")
    organized_events = relationship("Event", back_populates="organizer")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<User id={self.id} email={self.email} status={self.status}>"

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def owner_id(self):
        """A user account is owned by the user itself."""
        return self.id

    def permission_names(self) -> Set[str]:
        """Names of the permissions granted through the user's role."""
        if self.role is None or self.role.deleted:
            return set()
        return self.role.permission_names()

    def to_summary(self) -> dict:
        """Public view of the user; never includes the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "fullName": self.full_name,
            "status": self.status.value if self.status else None,
            "role": self.role.name if self.role is not None else None,
        }


class Role(Base):
    """Role model for RBAC system."""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="role")
    permissions = relationship("RolePermission", back_populates="role", cascade="all, delete-orphan")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Role id={self.id} name={self.name}>"

    def permission_names(self) -> Set[str]:
        return {rp.permission.name for rp in self.permissions if rp.permission is not None}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "permissions": sorted(self.permission_names()),
        }


class Permission(Base):
    """Permission model for granular access control."""
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Relationships
    roles = relationship("RolePermission", back_populates="permission")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Permission id={self.id} name={self.name}>"


class RolePermission(Base):
    """Association table for Role-Permission many-to-many relationship."""
    __tablename__ = "role_permissions"
    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),)

    id = Column(Integer, primary_key=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    permission_id = Column(Integer, ForeignKey("permissions.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    role = relationship("Role", back_populates="permissions")
    permission = relationship("Permission", back_populates="roles")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<RolePermission role_id={self.role_id} permission_id={self.permission_id}>"


# ==========================
# OWNED RESOURCES
# ==========================

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(256), nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    visibility = Column(Enum(EventVisibility), nullable=False, default=EventVisibility.PUBLIC)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    organizer = relationship("User", back_populates="organized_events")
    attendees = relationship("User", secondary=event_attendees)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Event id={self.id} title={self.title} organizer_id={self.organizer_id}>"

    @property
    def owner_id(self):
        return self.organizer_id

    @property
    def invitee_ids(self) -> Set[int]:
        return {user.id for user in self.attendees}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "visibility": self.visibility.value if self.visibility else None,
            "organizerId": self.organizer_id,
            "attendeeIds": sorted(self.invitee_ids),
        }
