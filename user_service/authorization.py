"""
Authentication and authorization of requests to the user service.

Routes that require an authenticated caller are protected with
:func:`authenticated`, which verifies the bearer token in the
``Authorization`` header and attaches the caller to the request as
``request.auth``, a :class:`.domain.Requester`.

Whether the caller may act on a particular user is decided by
:func:`is_authorized`. That decision is made by the controllers, never by
:class:`.UserService`.

.. code-block:: python

   @blueprint.route('/<int:user_id>', methods=['GET'])
   @authenticated
   def read_user(user_id: int) -> tuple:
       data, status_code, headers = users.get_user(
           get_service(), request.auth, user_id
       )
       return jsonify(data), status_code, headers

"""

from typing import Any, Callable, Optional
from functools import wraps
import logging

from flask import current_app, request
from werkzeug.exceptions import Unauthorized

from .domain import Requester
from .exceptions import InvalidToken

logger = logging.getLogger(__name__)

BEARER = 'bearer'


def is_authorized(requester: Requester, target_id: int) -> bool:
    """An admin may act on anyone; other users may only act on themselves."""
    return bool(requester.is_admin) or requester.id == target_id


def get_bearer_token(header: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != BEARER:
        return None
    return parts[1]


def authenticated(func: Callable) -> Callable:
    """
    Require a valid bearer token before executing the decorated route.

    Raises
    ------
    :class:`.Unauthorized`
        Raised when the token is missing, or cannot be verified.

    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = get_bearer_token(request.headers.get('Authorization'))
        if token is None:
            logger.debug('No auth token; aborting')
            raise Unauthorized('Unauthorized')
        service = current_app.extensions['user_service']
        try:
            claims = service.validate_token(token)
        except InvalidToken as e:
            logger.debug('Auth token not valid')
            raise Unauthorized('Unauthorized') from e
        try:
            request.auth = Requester(id=int(claims['id']),
                                     is_admin=bool(claims.get('is_admin')))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug('Auth token does not identify a user')
            raise Unauthorized('Unauthorized') from e
        return func(*args, **kwargs)
    return wrapper
