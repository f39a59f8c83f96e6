"""Application factory for the user service."""

from typing import Any, Mapping, Optional
from datetime import timedelta
import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException, Forbidden, Unauthorized, \
    BadRequest, MethodNotAllowed, InternalServerError, NotFound

from .app_logging import setup_logger
from .routes import external_api
from .services import datastore
from .services.datastore import UserStore
from .services.tokens import TokenCodec
from .services.users import UserService

logger = logging.getLogger(__name__)


def create_web_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize and configure the user service application.

    Parameters
    ----------
    config : dict
        Overrides for values in :mod:`user_service.config`.

    """
    app = Flask('user_service')
    app.config.from_pyfile('config.py')
    if config:
        app.config.update(config)

    if not app.config.get('TESTING'):
        setup_logger(app.config['LOGLEVEL'], app.config['LOGFILE'],
                     app.config['LOG_JSON'])

    datastore.init_app(app)
    app.extensions['user_service'] = create_service(app)

    app.register_blueprint(external_api.health)
    app.register_blueprint(external_api.blueprint)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    register_error_handlers(app)
    logger.debug('Created user service app')
    return app


def create_service(app: Flask) -> UserService:
    """Wire up a :class:`.UserService` using the app's configuration."""
    expires_in = app.config['JWT_EXPIRES_IN']
    tokens = TokenCodec(
        app.config['JWT_SECRET'],
        timedelta(seconds=expires_in) if expires_in else None
    )
    return UserService(UserStore(), tokens,
                       rounds=app.config['BCRYPT_ROUNDS'])


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response
