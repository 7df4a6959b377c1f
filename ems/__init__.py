import logging

from flask import Flask

from .config import settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(test_config=None):
    app = Flask(__name__)

    # Load configuration from settings
    app.config.from_mapping(
        SECRET_KEY=settings.SECRET_KEY,
        DATABASE_URL=settings.DATABASE_URL,
        JWT_SECRET_KEY=settings.JWT_SECRET_KEY,
        JWT_ALGORITHM=settings.JWT_ALGORITHM,
        JWT_ACCESS_TOKEN_EXPIRATION=settings.JWT_ACCESS_TOKEN_EXPIRATION,
        JWT_REFRESH_TOKEN_EXPIRATION=settings.JWT_REFRESH_TOKEN_EXPIRATION,
        BCRYPT_ROUNDS=settings.BCRYPT_ROUNDS,
        DEBUG=settings.DEBUG,
        LOG_LEVEL=settings.LOG_LEVEL,
        # Security settings
        AUTH_RATE_LIMIT=settings.AUTH_RATE_LIMIT,
        RATELIMIT_STORAGE_URI=settings.RATELIMIT_STORAGE_URI,
        SUPERADMIN_EMAIL=settings.SUPERADMIN_EMAIL,
        SUPERADMIN_PASSWORD=settings.SUPERADMIN_PASSWORD,
    )

    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    from .auth.auth_service import AuthService
    from .auth.authorization import PermissionEvaluator
    from .auth.jwt_manager import JWTManager
    from .auth.middleware import AuthMiddleware
    from .auth.passwords import PasswordHasher
    from .auth.token_registry import TokenRegistry
    from .database import create_db_engine, create_session_factory
    from .errors import register_error_handlers
    from .routes import auth_bp, events_bp, roles_bp, users_bp
    from .security import init_security

    engine = create_db_engine(app.config["DATABASE_URL"], echo=bool(app.config.get("SQL_ECHO", False)))
    SessionLocal = create_session_factory(engine)

    # Raises ConfigurationError on a weak secret, so a misconfigured app never starts
    jwt_manager = JWTManager(app.config["JWT_SECRET_KEY"], app.config["JWT_ALGORITHM"])
    registry = TokenRegistry()
    hasher = PasswordHasher(rounds=app.config["BCRYPT_ROUNDS"])
    auth_service = AuthService(
        SessionLocal,
        jwt_manager,
        registry,
        hasher,
        access_ttl_ms=app.config["JWT_ACCESS_TOKEN_EXPIRATION"],
        refresh_ttl_ms=app.config["JWT_REFRESH_TOKEN_EXPIRATION"],
    )

    # attach to app for other modules to use
    app.extensions["db_engine"] = engine
    app.extensions["db_session_factory"] = SessionLocal
    app.extensions["jwt_manager"] = jwt_manager
    app.extensions["token_registry"] = registry
    app.extensions["password_hasher"] = hasher
    app.extensions["auth_service"] = auth_service
    app.extensions["permission_evaluator"] = PermissionEvaluator()

    init_security(app)
    AuthMiddleware(jwt_manager, registry, SessionLocal, app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(roles_bp)
    app.register_blueprint(users_bp)

    # helper to create DB tables based on SQLAlchemy models
    def init_db():
        from .models import Base

        Base.metadata.create_all(bind=engine)

    app.init_db = init_db

    # helper to seed permissions, roles and the superadmin
    def init_auth(admin_email=None, admin_password=None):
        from .auth.init_auth import AuthInitializer

        auth_init = AuthInitializer(SessionLocal, hasher)
        auth_init.initialize_all(
            admin_email or app.config["SUPERADMIN_EMAIL"],
            admin_password or app.config["SUPERADMIN_PASSWORD"],
        )

    app.init_auth = init_auth

    return app
