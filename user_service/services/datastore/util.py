"""Helpers and Flask application integration."""

from typing import Any, Generator
from contextlib import contextmanager
import logging

from flask import Flask
from sqlalchemy import event, text
from sqlalchemy.orm.session import Session

from .models import db

logger = logging.getLogger(__name__)


@contextmanager
def transaction() -> Generator[Session, None, None]:
    """
    Context manager for database transaction.

    Everything done with the session inside the block is committed together
    when the block exits. If anything raises, the whole transaction is rolled
    back and the exception is re-raised.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        logger.error('Transaction failed, rolling back: %s', str(e))
        db.session.rollback()
        raise


def init_app(app: Flask) -> None:
    """
    Attach the database to the application.

    SQLite compares ASCII case-insensitively in ``LIKE`` by default; name
    searches must be case-sensitive on every backend.
    """
    db.init_app(app)
    with app.app_context():
        engine = db.engine
    if engine.dialect.name == 'sqlite':
        event.listen(engine, 'connect', set_sqlite_pragma)


def set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
    """Make ``LIKE`` case-sensitive on a new SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute('PRAGMA case_sensitive_like=ON')
    cursor.close()


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()


def is_available() -> bool:
    """Check our connection to the database."""
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        logger.error('Encountered an error talking to database: %s', e)
        return False
    return True
