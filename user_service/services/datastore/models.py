"""SQLAlchemy models for the user datastore."""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from pytz import UTC
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

db: SQLAlchemy = SQLAlchemy()


def utcnow() -> datetime:
    """Get the current time in UTC, as stored (without tzinfo)."""
    return datetime.now(tz=UTC).replace(tzinfo=None)


class DBCredentials(db.Model):
    """
    Password credentials for a user.

        +------------+--------------+------+-----+
        | Field      | Type         | Null | Key |
        +------------+--------------+------+-----+
        | id         | int          | NO   | PRI |
        | hash       | varchar(255) | NO   |     |
        | created_at | datetime     | NO   |     |
        | updated_at | datetime     | NO   |     |
        +------------+--------------+------+-----+
    """

    __tablename__ = 'credentials'

    id = Column(Integer, primary_key=True, autoincrement=True)
    hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow,
                        onupdate=utcnow)

    user = relationship('DBUser', back_populates='credentials', uselist=False)


class DBUser(db.Model):
    """
    A user account.

    Deleted users are kept, with ``email`` and ``credentials_id`` set to
    ``NULL``.

        +-----------------+--------------+------+-----+
        | Field           | Type         | Null | Key |
        +-----------------+--------------+------+-----+
        | id              | int          | NO   | PRI |
        | name            | varchar(255) | NO   |     |
        | email           | varchar(255) | YES  | UNI |
        | confirmed_email | bool         | NO   |     |
        | is_admin        | bool         | NO   |     |
        | credentials_id  | int          | YES  | UNI |
        | created_at      | datetime     | NO   |     |
        | updated_at      | datetime     | NO   | MUL |
        +-----------------+--------------+------+-----+
    """

    __tablename__ = 'user'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    confirmed_email = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    credentials_id = Column(
        ForeignKey('credentials.id', ondelete='SET NULL'),
        nullable=True,
        unique=True
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow,
                        onupdate=utcnow, index=True)

    credentials = relationship('DBCredentials', back_populates='user',
                               uselist=False)
