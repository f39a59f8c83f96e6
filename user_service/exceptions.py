"""Exceptions raised by the user service."""


class DuplicateEmail(RuntimeError):
    """An active user already has the requested e-mail address."""


class NoSuchUser(RuntimeError):
    """There is no active user with the requested id."""


class InvalidCredentials(RuntimeError):
    """The e-mail address or password is not correct."""


class InvalidToken(RuntimeError):
    """The token could not be verified."""
