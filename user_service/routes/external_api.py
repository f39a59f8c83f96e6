"""Provides routes for the external API."""

from flask import Blueprint, Response, current_app, jsonify, make_response, \
    request

from .. import status
from ..authorization import authenticated
from ..controllers import users
from ..services import datastore
from ..services.users import UserService

blueprint = Blueprint('external_api', __name__, url_prefix='/user')
health = Blueprint('health', __name__, url_prefix='/api')


def get_service() -> UserService:
    """Get the :class:`.UserService` attached to the current app."""
    service: UserService = current_app.extensions['user_service']
    return service


@health.route('/_health', methods=['GET'])
def ok() -> Response:
    """Health check endpoint."""
    if not datastore.is_available():
        return make_response('Unavailable', status.HTTP_503_SERVICE_UNAVAILABLE)
    return make_response('OK', status.HTTP_200_OK)


@blueprint.route('', methods=['GET'])
@authenticated
def find_users() -> tuple:
    """Admins may search for users; anyone else gets themselves."""
    data, status_code, headers = users.find_users(get_service(), request.auth,
                                                  request.args)
    return jsonify(data), status_code, headers


@blueprint.route('/<int:user_id>', methods=['GET'])
@authenticated
def read_user(user_id: int) -> tuple:
    """Provide data about a single user."""
    data, status_code, headers = users.get_user(get_service(), request.auth,
                                                user_id)
    return jsonify(data), status_code, headers


@blueprint.route('', methods=['POST'])
def create_user() -> tuple:
    """Create a new user."""
    payload = request.get_json(force=True, silent=True)    # Ignore Content-Type.
    data, status_code, headers = users.create_user(get_service(), payload)
    return jsonify(data), status_code, headers


@blueprint.route('', methods=['PATCH'])
@authenticated
def update_user() -> tuple:
    """Update a user."""
    payload = request.get_json(force=True, silent=True)
    data, status_code, headers = users.update_user(get_service(),
                                                   request.auth, payload)
    return jsonify(data), status_code, headers


@blueprint.route('', methods=['DELETE'])
@authenticated
def delete_user() -> tuple:
    """Delete a user."""
    payload = request.get_json(force=True, silent=True)
    data, status_code, headers = users.delete_user(get_service(),
                                                   request.auth, payload)
    return jsonify(data), status_code, headers


@blueprint.route('/validate', methods=['POST'])
def validate_token() -> tuple:
    """Verify the bearer token on the request, and return its claims."""
    data, status_code, headers = users.validate_token(
        get_service(),
        request.headers.get('Authorization')
    )
    return jsonify(data), status_code, headers


@blueprint.route('/authenticate', methods=['POST'])
def authenticate() -> tuple:
    """Check an e-mail and password."""
    payload = request.get_json(force=True, silent=True)
    data, status_code, headers = users.authenticate(get_service(), payload)
    return jsonify(data), status_code, headers


@blueprint.route('/token', methods=['POST'])
def get_token() -> tuple:
    """Exchange an e-mail and password for a token."""
    payload = request.get_json(force=True, silent=True)
    data, status_code, headers = users.get_token(get_service(), payload)
    return jsonify(data), status_code, headers
