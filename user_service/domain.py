"""Defines the core data structures for the user service."""

from typing import Any, Optional, NamedTuple, List
from datetime import datetime

DELETED_USER_NAME = '(deleted)'
"""Name given to a user record when the account is deleted."""


class Credentials(NamedTuple):
    """Stored credentials for a user account."""

    id: int
    """Unique identifier for the credentials row."""

    hash: str
    """Salted hash of the user's password."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class User(NamedTuple):
    """A user account."""

    id: int
    """Unique identifier assigned by the datastore."""

    name: str
    """Display name, or :const:`DELETED_USER_NAME` if deleted."""

    email: Optional[str]
    """
    E-mail address of the user.

    Unique among active users. This is ``None`` only for deleted accounts.
    """

    confirmed_email: bool = False
    """Indicates whether the e-mail address has been confirmed."""

    is_admin: bool = False
    """Administrators may act on any user account."""

    credentials_id: Optional[int] = None
    """Reference to the :class:`.Credentials` owned by this user."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    credentials: Optional[Credentials] = None
    """Only populated when credentials were explicitly requested."""

    @property
    def is_active(self) -> bool:
        """An account is active until it has been deleted."""
        return self.email is not None


class Requester(NamedTuple):
    """The authenticated caller of a request, as asserted by its token."""

    id: int
    is_admin: bool = False


class FindUserFilter(NamedTuple):
    """Parameters for finding users."""

    id: Optional[List[int]] = None
    """Match any of these user ids."""

    name: Optional[str] = None
    """Match users whose name contains this string."""

    email: Optional[str] = None
    """Match the user with exactly this e-mail address."""

    limit: Optional[int] = None
    offset: Optional[int] = None

    credentials: bool = False
    """Include the credentials of each user in the results."""

    updated_since: Optional[datetime] = None
    """Match users updated at or after this time."""


class CreateUserRequest(NamedTuple):
    """Data required to create a new user account."""

    name: str
    email: str
    password: str
    confirmed_email: bool = False
    is_admin: bool = False


class UpdateUserRequest(NamedTuple):
    """
    A partial update to a user account.

    Fields that are ``None`` are left unchanged.
    """

    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = None

    def changes(self) -> dict:
        """Get the user fields (other than the password) to be changed."""
        return {field: value for field, value
                in self._asdict().items()
                if field not in ('id', 'password') and value is not None}


class DeleteUserRequest(NamedTuple):
    """Identifies the user account to delete."""

    id: int


class AuthenticateRequest(NamedTuple):
    """E-mail and password provided by a user."""

    email: str
    password: str


class Predicate(NamedTuple):
    """A single condition on a user field."""

    NOT_NULL = 'not_null'
    EQ = 'eq'
    IN = 'in'
    CONTAINS = 'contains'
    GTE = 'gte'

    field: str
    """Name of a field on :class:`.User`."""

    op: str
    """One of the operator constants, e.g. :attr:`.EQ`."""

    value: Any = None


class UserQuery(NamedTuple):
    """Describes a query for users; executed by the datastore."""

    where: List[Predicate]
    """All of these conditions must hold."""

    limit: Optional[int] = None
    offset: Optional[int] = None
    include_credentials: bool = False


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    This just uses the built-in ``_asdict`` method on the intance, but also
    calls this on any child NamedTuple instances (recursively) so that the
    entire tree is cast to ``dict``.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore
    _data = {}

    def _cast(obj: Any) -> Any:
        if hasattr(obj, '_asdict'):
            obj = to_dict(obj)
        elif isinstance(obj, datetime):
            obj = obj.isoformat()
        elif isinstance(obj, list):
            obj = [_cast(o) for o in obj]
        return obj

    for key, value in data.items():
        _data[key] = _cast(value)
    return _data
