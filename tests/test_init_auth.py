import pytest
from sqlalchemy import inspect

from ems import create_app
from ems.auth.init_auth import AuthInitializer
from ems.auth.permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLES
from ems.errors import ConfigurationError
from ems.models import Permission, Role, RolePermission, User

from conftest import SUPERADMIN_EMAIL


def test_init_db_creates_tables(app):
    tables = set(inspect(app.extensions["db_engine"]).get_table_names())
    assert {"users", "roles", "permissions", "role_permissions", "events", "event_attendees"} <= tables


def test_seed_creates_catalogue(db_session):
    assert db_session.query(Permission).count() == len(DEFAULT_PERMISSIONS)
    assert {r.name for r in db_session.query(Role).all()} == set(DEFAULT_ROLES)
    assert db_session.query(User).filter(User.email == SUPERADMIN_EMAIL).count() == 1


def test_seed_is_idempotent(app, db_session):
    links_before = db_session.query(RolePermission).count()

    initializer = AuthInitializer(app.extensions["db_session_factory"], app.extensions["password_hasher"])
    assert initializer.initialize_permissions() == 0
    assert initializer.initialize_roles() == 0
    app.init_auth()

    assert db_session.query(RolePermission).count() == links_before
    assert db_session.query(User).count() == 1


def test_create_superadmin_returns_existing_user(app, db_session):
    initializer = AuthInitializer(app.extensions["db_session_factory"], app.extensions["password_hasher"])
    existing = db_session.query(User).filter(User.email == SUPERADMIN_EMAIL).one()

    assert initializer.create_superadmin(SUPERADMIN_EMAIL.upper(), "whatever") == existing.id


def test_weak_secret_prevents_startup():
    with pytest.raises(ConfigurationError):
        create_app({"TESTING": True, "DATABASE_URL": "sqlite://", "JWT_SECRET_KEY": "short"})
