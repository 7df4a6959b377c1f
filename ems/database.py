"""Database engine and session helpers."""

import logging
from contextlib import contextmanager
from typing import Iterator

from flask import current_app
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine configured for the database type."""
    if database_url.startswith('postgresql'):
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=echo,
        )

    if database_url in ('sqlite://', 'sqlite:///:memory:'):
        # One shared connection, otherwise every thread sees an empty database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )

    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith('sqlite') else {},
        echo=echo,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def get_db_session() -> Iterator[Session]:
    """Session from the current app's factory with automatic cleanup."""
    db = current_app.extensions["db_session_factory"]()
    try:
        yield db
    finally:
        db.close()
