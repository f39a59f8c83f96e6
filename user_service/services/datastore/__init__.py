"""Database integration for persisting users and their credentials."""

from typing import Generator, List, Optional, Any
from contextlib import contextmanager
from datetime import datetime
import logging

from pytz import UTC
from sqlalchemy.orm import Query, joinedload
from sqlalchemy.orm.session import Session

from . import util, models
from .models import DBUser, DBCredentials
from ... import domain
from ...domain import Predicate, UserQuery

logger = logging.getLogger(__name__)


class NoSuchCredentials(RuntimeError):
    """A non-existant :class:`domain.Credentials` was requested."""


init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
is_available = util.is_available

QUERYABLE = ('id', 'name', 'email', 'updated_at')
"""User fields that may be used in a :class:`.Predicate`."""

UPDATABLE = ('name', 'email', 'confirmed_email', 'is_admin', 'credentials_id')
"""User fields that may be changed by :meth:`UnitOfWork.update_user`."""


class UnitOfWork:
    """
    Write operations that are committed (or rolled back) together.

    Get one from :meth:`UserStore.atomic`; do not instantiate directly.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert_credentials(self, hash: str) -> domain.Credentials:
        """Add a new credentials row with a password hash."""
        db_credentials = DBCredentials(hash=hash)
        self.session.add(db_credentials)
        self.session.flush()    # Get the generated id.
        return _credentials_to_domain(db_credentials)

    def update_credentials(self, credentials_id: int,
                           hash: str) -> domain.Credentials:
        """Replace the password hash on an existing credentials row."""
        db_credentials = self._load_dbcredentials(credentials_id)
        db_credentials.hash = hash
        self.session.add(db_credentials)
        self.session.flush()
        return _credentials_to_domain(db_credentials)

    def delete_credentials(self, credentials_id: int) -> None:
        """Remove a credentials row, detaching it from its user."""
        db_credentials = self._load_dbcredentials(credentials_id)
        self.session.delete(db_credentials)
        self.session.flush()

    def insert_user(self, name: str, email: str, credentials_id: int,
                    confirmed_email: bool = False,
                    is_admin: bool = False) -> domain.User:
        """Add a new user row that owns the credentials ``credentials_id``."""
        db_user = DBUser(
            name=name,
            email=email,
            confirmed_email=confirmed_email,
            is_admin=is_admin,
            credentials_id=credentials_id
        )
        self.session.add(db_user)
        self.session.flush()
        return _user_to_domain(db_user)

    def update_user(self, user_id: int, **changes: Any) -> domain.User:
        """
        Set fields on a user row.

        Parameters
        ----------
        user_id : int
        changes
            New values for any of the fields in :const:`UPDATABLE`.

        Returns
        -------
        :class:`domain.User`

        """
        unknown = set(changes) - set(UPDATABLE)
        if unknown:
            raise ValueError(f'Cannot update {", ".join(sorted(unknown))}')
        db_user = self.session.get(DBUser, user_id)
        if db_user is None:
            raise RuntimeError(f'User {user_id} does not exist')
        for field, value in changes.items():
            setattr(db_user, field, value)
        self.session.add(db_user)
        self.session.flush()
        return _user_to_domain(db_user)

    def _load_dbcredentials(self, credentials_id: int) -> DBCredentials:
        db_credentials = self.session.get(DBCredentials, credentials_id)
        if db_credentials is None:
            raise NoSuchCredentials(
                f'Credentials {credentials_id} do not exist'
            )
        return db_credentials


class UserStore:
    """Reads and writes users and credentials in the database."""

    def list_users(self, query: UserQuery) -> List[domain.User]:
        """
        Get all users that match a :class:`.UserQuery`.

        Results are ordered by user id.
        """
        q = self._filtered(query.where, query.include_credentials)
        q = q.order_by(DBUser.id)
        if query.offset:
            q = q.offset(query.offset)
        if query.limit:
            q = q.limit(query.limit)
        return [_user_to_domain(db_user, query.include_credentials)
                for db_user in q.all()]

    def find_one_user(self, where: List[Predicate],
                      include_credentials: bool = False) \
            -> Optional[domain.User]:
        """Get the first user that matches all of the ``where`` conditions."""
        db_user = self._filtered(where, include_credentials) \
            .order_by(DBUser.id) \
            .first()
        if db_user is None:
            return None
        return _user_to_domain(db_user, include_credentials)

    @contextmanager
    def atomic(self) -> Generator[UnitOfWork, None, None]:
        """
        Perform writes as a single transaction.

        .. code-block:: python

           with store.atomic() as unit:
               credentials = unit.insert_credentials(hash)
               unit.insert_user(name, email, credentials.id)

        """
        with util.transaction() as session:
            yield UnitOfWork(session)

    def _filtered(self, where: List[Predicate],
                  include_credentials: bool) -> Query:
        q = util.db.session.query(DBUser)
        for predicate in where:
            q = q.filter(_condition(predicate))
        if include_credentials:
            q = q.options(joinedload(DBUser.credentials))
        return q


def _condition(predicate: Predicate) -> Any:
    if predicate.field not in QUERYABLE:
        raise ValueError(f'Cannot query users by {predicate.field}')
    column = getattr(DBUser, predicate.field)
    value = _as_stored(predicate.value)
    if predicate.op == Predicate.NOT_NULL:
        return column.isnot(None)
    if predicate.op == Predicate.EQ:
        return column == value
    if predicate.op == Predicate.IN:
        return column.in_(value)
    if predicate.op == Predicate.CONTAINS:
        return column.contains(value, autoescape=True)
    if predicate.op == Predicate.GTE:
        return column >= value
    raise ValueError(f'Unknown operator {predicate.op}')


def _as_stored(value: Any) -> Any:
    """Timestamps are stored as naive UTC."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _credentials_to_domain(db_credentials: DBCredentials) \
        -> domain.Credentials:
    return domain.Credentials(
        id=db_credentials.id,
        hash=db_credentials.hash,
        created_at=db_credentials.created_at,
        updated_at=db_credentials.updated_at
    )


def _user_to_domain(db_user: DBUser,
                    include_credentials: bool = False) -> domain.User:
    credentials = None
    if include_credentials and db_user.credentials is not None:
        credentials = _credentials_to_domain(db_user.credentials)
    return domain.User(
        id=db_user.id,
        name=db_user.name,
        email=db_user.email,
        confirmed_email=bool(db_user.confirmed_email),
        is_admin=bool(db_user.is_admin),
        credentials_id=db_user.credentials_id,
        created_at=db_user.created_at,
        updated_at=db_user.updated_at,
        credentials=credentials
    )
