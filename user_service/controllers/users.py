"""
Handles all user-related requests.

Each controller validates its input, checks that the requester may act on
the target user, and calls :class:`.UserService`. Controllers return a tuple
of response data, HTTP status code, and extra headers.
"""

from typing import Any, List, Optional, Tuple
import logging

import dateutil.parser
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest

from .. import status
from ..authorization import is_authorized, get_bearer_token
from ..domain import User, Requester, FindUserFilter, CreateUserRequest, \
    UpdateUserRequest, DeleteUserRequest, to_dict
from ..exceptions import DuplicateEmail, NoSuchUser, InvalidCredentials, \
    InvalidToken
from ..services.users import UserService
from .util import validate

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = {
    'reason': 'You are not authorized to perform this operation'
}
TRUE_VALUES = ('true', '1')
FALSE_VALUES = ('false', '0', '')


Response = Tuple[Optional[Any], int, dict]


def find_users(service: UserService, requester: Requester,
               args: MultiDict) -> Response:
    """
    Find users matching the query parameters in ``args``.

    Administrators get a list of all matching users. Anyone else gets their
    own user record, regardless of the parameters.

    Parameters
    ----------
    service : :class:`.UserService`
    requester : :class:`.Requester`
    args : :class:`.MultiDict`
        Query parameters; see :func:`parse_find_params`.

    Returns
    -------
    list or dict
        User data.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    params = parse_find_params(args)
    if requester.is_admin:
        users = service.find(params)
        return [user_data(user) for user in users], status.HTTP_200_OK, {}
    user = service.find_unique({'id': requester.id})
    data = user_data(user) if user is not None else None
    return data, status.HTTP_200_OK, {}


def get_user(service: UserService, requester: Requester,
             user_id: int) -> Response:
    """
    Get a single user, if the requester is allowed to see them.

    The data is ``None`` if there is no such active user.
    """
    if not is_authorized(requester, user_id):
        return NOT_AUTHORIZED, status.HTTP_401_UNAUTHORIZED, {}
    user = service.find_unique({'id': user_id})
    data = user_data(user) if user is not None else None
    return data, status.HTTP_200_OK, {}


def create_user(service: UserService, payload: Any) -> Response:
    """
    Create a new user.

    Parameters
    ----------
    service : :class:`.UserService`
    payload : dict
        Must include ``name``, ``email`` and ``password``; may include
        ``confirmed_email`` and ``is_admin``.

    Returns
    -------
    dict
        Data about the new user.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    validate(payload, 'create_user')
    request = CreateUserRequest(
        name=payload['name'],
        email=payload['email'],
        password=payload['password'],
        confirmed_email=payload.get('confirmed_email', False),
        is_admin=payload.get('is_admin', False)
    )
    try:
        user = service.create(request)
    except DuplicateEmail as e:
        return {'reason': str(e)}, status.HTTP_400_BAD_REQUEST, {}
    return user_data(user), status.HTTP_200_OK, {}


def update_user(service: UserService, requester: Requester,
                payload: Any) -> Response:
    """Apply a partial update to the user identified in ``payload``."""
    validate(payload, 'update_user')
    if not is_authorized(requester, payload['id']):
        return NOT_AUTHORIZED, status.HTTP_401_UNAUTHORIZED, {}
    request = UpdateUserRequest(
        id=payload['id'],
        name=payload.get('name'),
        email=payload.get('email'),
        password=payload.get('password'),
        is_admin=payload.get('is_admin')
    )
    try:
        user = service.update(request)
    except (NoSuchUser, DuplicateEmail) as e:
        return {'reason': str(e)}, status.HTTP_400_BAD_REQUEST, {}
    return user_data(user), status.HTTP_200_OK, {}


def delete_user(service: UserService, requester: Requester,
                payload: Any) -> Response:
    """Delete the user identified in ``payload``."""
    validate(payload, 'delete_user')
    if not is_authorized(requester, payload['id']):
        return NOT_AUTHORIZED, status.HTTP_401_UNAUTHORIZED, {}
    try:
        user = service.delete(DeleteUserRequest(id=payload['id']))
    except NoSuchUser as e:
        return {'reason': str(e)}, status.HTTP_400_BAD_REQUEST, {}
    return user_data(user), status.HTTP_200_OK, {}


def validate_token(service: UserService,
                   authorization: Optional[str]) -> Response:
    """Verify the bearer token in an ``Authorization`` header."""
    token = get_bearer_token(authorization) or ''
    try:
        claims = service.validate_token(token)
    except InvalidToken as e:
        return {'reason': str(e)}, status.HTTP_400_BAD_REQUEST, {}
    return claims, status.HTTP_200_OK, {}


def authenticate(service: UserService, payload: Any) -> Response:
    """Check an e-mail and password; the result is true or false."""
    validate(payload, 'authenticate')
    result = service.authenticate(payload['email'], payload['password'])
    return result, status.HTTP_200_OK, {}


def get_token(service: UserService, payload: Any) -> Response:
    """Exchange an e-mail and password for a token."""
    validate(payload, 'authenticate')
    try:
        result = service.authenticate_and_get_jwt_token(payload['email'],
                                                        payload['password'])
    except InvalidCredentials as e:
        return {'reason': str(e)}, status.HTTP_400_BAD_REQUEST, {}
    return result, status.HTTP_200_OK, {}


def user_data(user: User) -> dict:
    """Get a JSON-ready representation of a :class:`.User`."""
    data = to_dict(user)
    if data['credentials'] is None:
        del data['credentials']
    return data


def parse_find_params(args: MultiDict) -> FindUserFilter:
    """
    Get :class:`.FindUserFilter` parameters from a query string.

    Parameters
    ----------
    args : :class:`.MultiDict`
        May include ``id`` (repeated, or comma-separated), ``name``,
        ``email``, ``limit``, ``offset``, ``credentials`` (``true`` or
        ``false``), and ``updated_since`` (an ISO-8601 datetime).

    Returns
    -------
    :class:`.FindUserFilter`

    Raises
    ------
    :class:`.BadRequest`
        Raised if any of the parameters has an invalid value.

    """
    ids: List[int] = []
    for value in args.getlist('id'):
        ids.extend(_int(v, 'id') for v in value.split(',') if v.strip())

    credentials = args.get('credentials', '').lower()
    if credentials not in TRUE_VALUES + FALSE_VALUES:
        raise BadRequest('credentials must be true or false')

    updated_since = None
    if args.get('updated_since'):
        try:
            updated_since = dateutil.parser.isoparse(args['updated_since'])
        except ValueError as e:
            raise BadRequest('updated_since must be an ISO-8601 date') from e

    return FindUserFilter(
        id=ids or None,
        name=args.get('name') or None,
        email=args.get('email') or None,
        limit=_int(args['limit'], 'limit') if args.get('limit') else None,
        offset=_int(args['offset'], 'offset') if args.get('offset') else None,
        credentials=credentials in TRUE_VALUES,
        updated_since=updated_since
    )


def _int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise BadRequest(f'{name} must be an integer') from e
    if name != 'id' and number < 0:
        raise BadRequest(f'{name} must not be negative')
    return number
