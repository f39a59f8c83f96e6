"""Helpers for validating request data."""

from typing import Any, Dict
import json
import os

import jsonschema
from werkzeug.exceptions import BadRequest

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)),
                           'schema')
MAX_PASSWORD_BYTES = 72
"""bcrypt ignores anything beyond this."""

_validators: Dict[str, jsonschema.Draft7Validator] = {}


def get_validator(name: str) -> jsonschema.Draft7Validator:
    """Load the request schema ``name`` from :const:`SCHEMA_PATH`."""
    if name not in _validators:
        with open(os.path.join(SCHEMA_PATH, f'{name}.json')) as f:
            schema = json.load(f)
        _validators[name] = jsonschema.Draft7Validator(
            schema,
            format_checker=jsonschema.FormatChecker()
        )
    return _validators[name]


def validate(payload: Any, name: str) -> None:
    """
    Validate request data against the schema ``name``.

    Raises
    ------
    :class:`.BadRequest`
        Raised if ``payload`` does not conform to the schema.

    """
    error = jsonschema.exceptions.best_match(
        get_validator(name).iter_errors(payload)
    )
    if error is not None:
        raise BadRequest(error.message)
    password = payload.get('password')
    if password and len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise BadRequest(f'password must be at most {MAX_PASSWORD_BYTES} bytes')
