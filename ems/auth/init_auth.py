"""Database initialization for the authentication system.

Seeds the default permissions and roles and creates the initial superadmin.
Every step is idempotent so it can run on each startup.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..models import Permission, Role, RolePermission, User, UserStatus
from ..repositories import normalize_email
from .passwords import PasswordHasher
from .permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLES, SUPERADMIN_ROLE

logger = logging.getLogger(__name__)


class AuthInitializer:
    """Initialize authentication system with default roles and permissions."""

    def __init__(self, session_factory, hasher: PasswordHasher):
        self.session_factory = session_factory
        self.hasher = hasher

    def initialize_permissions(self) -> int:
        """Create default permissions. Returns how many were created."""
        session = self.session_factory()
        try:
            existing = {name for (name,) in session.query(Permission.name).all()}
            created_count = 0
            for name, description in DEFAULT_PERMISSIONS:
                if name not in existing:
                    session.add(Permission(name=name, description=description))
                    created_count += 1

            session.commit()
            logger.info(f"Created {created_count} permissions")
            return created_count
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to initialize permissions")
            raise
        finally:
            session.close()

    def initialize_roles(self) -> int:
        """Create default roles with their permissions. Returns roles created."""
        session = self.session_factory()
        try:
            all_permissions = {p.name: p for p in session.query(Permission).all()}

            created_count = 0
            for role_name, role_config in DEFAULT_ROLES.items():
                role = session.query(Role).filter(Role.name == role_name).first()
                if not role:
                    role = Role(name=role_name, description=role_config["description"])
                    session.add(role)
                    session.flush()  # Get the ID
                    created_count += 1

                wanted = role_config["permissions"]
                if wanted is None:
                    wanted = list(all_permissions)

                assigned = {
                    pid for (pid,) in session.query(RolePermission.permission_id)
                    .filter(RolePermission.role_id == role.id)
                    .all()
                }
                for perm_name in wanted:
                    permission = all_permissions.get(perm_name)
                    if permission is None:
                        logger.warning(f"Unknown permission {perm_name} for role {role_name}")
                        continue
                    if permission.id not in assigned:
                        session.add(RolePermission(role_id=role.id, permission_id=permission.id))

            session.commit()
            logger.info(f"Created {created_count} roles")
            return created_count
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to initialize roles")
            raise
        finally:
            session.close()

    def create_superadmin(self, email: str, password: str,
                          full_name: str = "Super Admin") -> int:
        """Create the initial superadmin user if missing. Returns its id."""
        session = self.session_factory()
        try:
            email = normalize_email(email)
            existing_user = session.query(User).filter(User.email == email).first()
            if existing_user:
                logger.info(f"Superadmin already exists: user {existing_user.id}")
                return existing_user.id

            role = session.query(Role).filter(Role.name == SUPERADMIN_ROLE).first()
            user = User(
                email=email,
                full_name=full_name,
                hashed_password=self.hasher.hash(password),
                status=UserStatus.ACTIVE,
                role=role,
            )
            session.add(user)
            session.commit()
            logger.info(f"Created superadmin user {user.id}")
            return user.id
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to create superadmin user")
            raise
        finally:
            session.close()

    def initialize_all(self, admin_email: str, admin_password: str) -> None:
        """Initialize complete authentication system."""
        logger.info("Initializing authentication system...")
        self.initialize_permissions()
        self.initialize_roles()
        self.create_superadmin(admin_email, admin_password)
        logger.info("Authentication system initialized successfully")
