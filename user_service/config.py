"""Flask configuration."""

import os

SECRET_KEY = os.environ.get('SECRET_KEY', 'asdf1234')
SERVER_NAME = os.environ.get('USER_SERVICE_SERVER_NAME')

LOGFILE = os.environ.get('LOGFILE')
LOGLEVEL = os.environ.get('LOGLEVEL', 20)
LOG_JSON = bool(int(os.environ.get('LOG_JSON', '1')))
"""If 1, log records are emitted as JSON objects."""

JWT_SECRET = os.environ.get('JWT_SECRET', 'foosecret')
JWT_EXPIRES_IN = int(os.environ.get('JWT_EXPIRES_IN', 60 * 60 * 24 * 365))
"""Lifetime of issued tokens, in seconds. 0 means tokens never expire."""

BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', 10))

SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_TRACK_MODIFICATIONS = False
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
