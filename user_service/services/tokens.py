"""Functions for working with authn/z tokens on user requests."""

from typing import Optional
from datetime import datetime, timedelta
import logging

import jwt
from pytz import UTC

from ..exceptions import InvalidToken

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'


class TokenCodec:
    """
    Signs and verifies claims as JSON Web Tokens.

    Parameters
    ----------
    secret : str
        Shared secret used to sign tokens.
    expires_in : :class:`timedelta` or None
        Lifetime of issued tokens. If ``None``, tokens do not expire.

    """

    def __init__(self, secret: str,
                 expires_in: Optional[timedelta] = None) -> None:
        self.secret = secret
        self.expires_in = expires_in

    def sign(self, claims: dict) -> str:
        """Encode ``claims`` as a signed JWT, with issue and expiry times."""
        payload = dict(claims)
        issued_at = datetime.now(tz=UTC)
        payload['iat'] = issued_at
        if self.expires_in is not None:
            payload['exp'] = issued_at + self.expires_in
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """
        Decode a signed JWT and return its claims.

        Raises
        ------
        :class:`.InvalidToken`
            Raised if the token is malformed, expired, or was not signed with
            our secret.

        """
        try:
            data: dict = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except jwt.exceptions.InvalidTokenError as e:
            logger.debug('Token verification failed: %s', e)
            raise InvalidToken('Not a valid token') from e
        return data
