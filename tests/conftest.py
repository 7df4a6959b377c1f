import pytest

from ems import create_app
from ems.auth.permissions import ADMIN_ROLE, ATTENDEE_ROLE
from ems.models import Permission, Role, User, UserStatus

TEST_SECRET = "test-jwt-secret-with-at-least-32-bytes!"
SUPERADMIN_EMAIL = "superadmin@ems.com"
PASSWORD = "Passw0rd!"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'ems-test.db'}",
        "JWT_SECRET_KEY": TEST_SECRET,
        "BCRYPT_ROUNDS": 4,
        "RATELIMIT_ENABLED": False,
        "LOG_LEVEL": "WARNING",
        "SUPERADMIN_EMAIL": SUPERADMIN_EMAIL,
        "SUPERADMIN_PASSWORD": PASSWORD,
    })
    app.init_db()
    app.init_auth()
    yield app
    app.extensions["db_engine"].dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def db_session(app):
    session = app.extensions["db_session_factory"]()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def create_user(app):
    """Factory creating a user with the given role; returns its id."""
    hasher = app.extensions["password_hasher"]
    Session = app.extensions["db_session_factory"]

    def _create(email, role_name=ATTENDEE_ROLE, password=PASSWORD, status=UserStatus.ACTIVE):
        session = Session()
        try:
            role = session.query(Role).filter(Role.name == role_name).first() if role_name else None
            user = User(
                email=email,
                full_name=email.split("@")[0],
                hashed_password=hasher.hash(password),
                status=status,
                role=role,
            )
            session.add(user)
            session.commit()
            return user.id
        finally:
            session.close()

    return _create


@pytest.fixture
def login(client):
    """Log in through the API and return the token response body."""

    def _login(email, password=PASSWORD):
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.get_json()
        return r.get_json()

    return _login


@pytest.fixture
def auth_headers(login):
    """Authorization headers for a fresh login of ``email``."""

    def _headers(email, password=PASSWORD):
        return {"Authorization": f"Bearer {login(email, password)['accessToken']}"}

    return _headers


@pytest.fixture
def role_id(db_session):
    def _role_id(name):
        return db_session.query(Role).filter(Role.name == name).one().id

    return _role_id


@pytest.fixture
def permission_id(db_session):
    def _permission_id(name):
        return db_session.query(Permission).filter(Permission.name == name).one().id

    return _permission_id


@pytest.fixture
def users(create_user):
    """Two organizers and two attendees, keyed by short name."""
    return {
        "admin": create_user("admin@ems.com", ADMIN_ROLE),
        "admin2": create_user("admin2@ems.com", ADMIN_ROLE),
        "attendee": create_user("attendee@ems.com", ATTENDEE_ROLE),
        "attendee2": create_user("attendee2@ems.com", ATTENDEE_ROLE),
    }
