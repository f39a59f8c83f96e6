"""
Orchestrates the datastore and codecs into user account operations.

:class:`UserService` trusts its caller: it performs no authorization of its
own. Access control is enforced at the HTTP boundary (see
:mod:`user_service.authorization`) before any of these methods are called.
"""

from typing import List, Mapping, Optional, Any
import logging

from . import filters, passwords
from .datastore import UserStore
from .tokens import TokenCodec
from ..domain import User, FindUserFilter, CreateUserRequest, \
    UpdateUserRequest, DeleteUserRequest, AuthenticateRequest, \
    DELETED_USER_NAME
from ..exceptions import DuplicateEmail, NoSuchUser, InvalidCredentials, \
    InvalidToken

logger = logging.getLogger(__name__)


class UserService:
    """
    User account operations.

    Parameters
    ----------
    store : :class:`.UserStore`
        Datastore for users and their credentials.
    tokens : :class:`.TokenCodec`
        Used to sign and verify authentication tokens.
    rounds : int
        Cost factor for password hashing.

    """

    def __init__(self, store: UserStore, tokens: TokenCodec,
                 rounds: int = passwords.ROUNDS) -> None:
        self.store = store
        self.tokens = tokens
        self.rounds = rounds

    def find(self, params: FindUserFilter) -> List[User]:
        """Get all active users that match ``params``."""
        query = filters.build_find_query(params)
        return self.store.list_users(query)

    def find_unique(self, where_unique: Mapping[str, Any],
                    include_credentials: bool = False) -> Optional[User]:
        """
        Get a single active user by ``id``, ``email``, or ``name``.

        Parameters
        ----------
        where_unique : dict
            E.g. ``{'id': 5}`` or ``{'email': 'foo@bar.com'}``.
        include_credentials : bool
            If True, the user's :class:`.Credentials` are loaded as well.

        Returns
        -------
        :class:`.User` or None

        """
        where = filters.unique_predicates(where_unique)
        return self.store.find_one_user(where, include_credentials)

    def create(self, request: CreateUserRequest) -> User:
        """
        Create a new user, along with credentials for their password.

        Raises
        ------
        :class:`.DuplicateEmail`
            Raised if an active user already has the requested e-mail. No
            credentials are stored in this case.

        """
        if self.find_unique({'email': request.email}) is not None:
            raise DuplicateEmail('Email already exists')

        hashed = passwords.hash_password(request.password, self.rounds)
        with self.store.atomic() as unit:
            credentials = unit.insert_credentials(hashed)
            user = unit.insert_user(
                name=request.name,
                email=request.email,
                credentials_id=credentials.id,
                confirmed_email=request.confirmed_email,
                is_admin=request.is_admin
            )
        logger.info('Created user %s', user.id)
        return user

    def update(self, request: UpdateUserRequest) -> User:
        """
        Update the user identified by ``request.id``.

        Only the fields set on ``request`` are changed. If the request carries
        nothing but a password (or nothing at all), the user as it was before
        the update is returned.

        Raises
        ------
        :class:`.NoSuchUser`
        :class:`.DuplicateEmail`
            Raised if the e-mail is being changed to one that belongs to
            another active user.

        """
        user = self.find_unique({'id': request.id})
        if user is None:
            raise NoSuchUser('User does not exist')

        changes = request.changes()
        if 'email' in changes and changes['email'] != user.email:
            if self.find_unique({'email': changes['email']}) is not None:
                raise DuplicateEmail('Email already exists')

        updated = user
        with self.store.atomic() as unit:
            if request.password:
                hashed = passwords.hash_password(request.password, self.rounds)
                unit.update_credentials(user.credentials_id, hashed)
            if changes:
                updated = unit.update_user(user.id, **changes)
        logger.info('Updated user %s', user.id)
        return updated

    def delete(self, request: DeleteUserRequest) -> User:
        """
        Delete a user.

        The user record is kept, but its name is replaced with
        :const:`.DELETED_USER_NAME`, its e-mail is cleared, and its
        credentials are removed. The user can no longer be found or
        authenticated.

        Raises
        ------
        :class:`.NoSuchUser`

        """
        user = self.find_unique({'id': request.id})
        if user is None:
            raise NoSuchUser('User not found')

        with self.store.atomic() as unit:
            if user.credentials_id is not None:
                unit.delete_credentials(user.credentials_id)
            deleted = unit.update_user(
                user.id,
                name=DELETED_USER_NAME,
                email=None,
                credentials_id=None
            )
        logger.info('Deleted user %s', user.id)
        return deleted

    def authenticate_and_get_jwt_token(self, email: str,
                                       password: str) -> dict:
        """
        Authenticate a user and issue a token for them.

        Returns
        -------
        dict
            ``{'token': str}``; the token claims are the user's ``id`` and
            ``is_admin``.

        Raises
        ------
        :class:`.InvalidCredentials`
            Raised if there is no active user with ``email``, or if the
            password is incorrect. The two cases are not distinguished.

        """
        user = self._check_credentials(AuthenticateRequest(email, password))
        if user is None:
            raise InvalidCredentials('Invalid credentials')
        token = self.tokens.sign({'id': user.id, 'is_admin': user.is_admin})
        return {'token': token}

    def authenticate(self, email: str, password: str) -> dict:
        """Check an e-mail and password; returns ``{'result': bool}``."""
        user = self._check_credentials(AuthenticateRequest(email, password))
        return {'result': user is not None}

    def validate_token(self, token: str) -> dict:
        """
        Verify a token and get its claims.

        This does not check whether the user still exists.

        Raises
        ------
        :class:`.InvalidToken`

        """
        try:
            return self.tokens.verify(token)
        except InvalidToken as e:
            raise InvalidToken('Invalid token') from e

    def _check_credentials(self, auth: AuthenticateRequest) -> Optional[User]:
        user = self.find_unique({'email': auth.email},
                                include_credentials=True)
        if user is None or user.credentials is None:
            logger.debug('No active user with that email')
            return None
        if not passwords.check_password(auth.password, user.credentials.hash):
            logger.debug('Password does not match for user %s', user.id)
            return None
        return user
