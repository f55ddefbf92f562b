"""Provides Flask integration for the accounts API."""

import logging
from http import HTTPStatus

from flask import Blueprint, Response, current_app, jsonify, \
    make_response, redirect, request
from werkzeug.exceptions import InternalServerError

from .auth import authenticate_user, current_user
from .controllers import sessions, telegram, users
from .domain import User
from .services.sessions import InvalidToken, SessionCreationFailed, \
    SessionDeletionFailed, SessionStore

logger = logging.getLogger(__name__)

blueprint = Blueprint('public', __name__, url_prefix='')
private = Blueprint('private', __name__, url_prefix='/private')
private.before_request(authenticate_user)

JSON = {'Content-Type': 'application/json'}


def start_session(response: Response, user: User) -> None:
    """Issue a session for ``user`` and set its cookie on ``response``."""
    try:
        session = SessionStore.current_session().issue(response, user)
    except SessionCreationFailed as e:
        logger.error('Could not create session: %s', e)
        raise InternalServerError('Cannot log in') from e
    logger.debug('Started session %s for user %s', session.session_id,
                 user.id)


@blueprint.route('/users', methods=['POST'])
def create_user() -> Response:
    """Register a new user with an e-mail address and a password."""
    payload = request.get_json(force=True, silent=True)
    data, code, headers = users.register(payload)
    return make_response(jsonify(data), code, headers)


@blueprint.route('/sessions', methods=['POST'])
def create_session() -> Response:
    """Log in with an e-mail address and a password."""
    payload = request.get_json(force=True, silent=True)
    data, code, headers = sessions.login(payload)
    response = make_response('', code, dict(JSON, **headers))
    start_session(response, data['user'])
    return response


@blueprint.route('/sessions', methods=['DELETE'])
def delete_session() -> Response:
    """Log out."""
    store = SessionStore.current_session()
    cookie = request.cookies.get(store.cookie_name)
    if cookie:
        try:
            store.delete(cookie)
        except InvalidToken as e:
            logger.debug('Ignoring invalid session cookie: %s', e)
        except SessionDeletionFailed as e:
            logger.error('Could not delete session: %s', e)
            raise InternalServerError('Cannot log out') from e
    response = make_response('', HTTPStatus.NO_CONTENT)
    response.delete_cookie(store.cookie_name)
    return response


@blueprint.route('/telegram/check', methods=['POST'])
def telegram_check() -> Response:
    """Log in with a Telegram id, registering the user if they are new."""
    payload = request.get_json(force=True, silent=True)
    next_page = current_app.config['DEFAULT_LOGIN_REDIRECT_URL']
    data, code, headers = telegram.check(payload, next_page)
    response = redirect(headers['Location'], code=code)
    start_session(response, data['user'])
    return response


@blueprint.route('/status', methods=['GET'])
def service_status() -> Response:
    """Get if the app is running."""
    return make_response(jsonify({'status': 'OK'}), HTTPStatus.OK)


@private.route('/whoami', methods=['GET'])
def whoami() -> Response:
    """Describe the authenticated user."""
    return make_response(jsonify(current_user().to_dict()), HTTPStatus.OK)
