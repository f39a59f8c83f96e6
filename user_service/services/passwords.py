"""Password hashing and verification."""

import bcrypt

ROUNDS = 10
"""Default bcrypt cost factor."""


def hash_password(password: str, rounds: int = ROUNDS) -> str:
    """
    Generate a salted bcrypt hash of a password.

    Parameters
    ----------
    password : str
        Plaintext password. Only the first 72 bytes of its UTF-8 encoding are
        significant to bcrypt; longer passwords are rejected at the API.
    rounds : int
        The bcrypt cost factor.

    Returns
    -------
    str

    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('ascii')


def check_password(password: str, hashed: str) -> bool:
    """Check a password against a hash from :func:`hash_password`."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('ascii'))
    except ValueError:  # Not a bcrypt hash.
        return False
