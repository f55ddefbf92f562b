"""Controllers for logging in with an e-mail address and a password."""

import logging
from http import HTTPStatus
from typing import Any

from werkzeug.exceptions import Unauthorized

from ..exceptions import NotFoundError, StoreError
from ..forms import LoginForm, load
from ..services.store import current_repository
from . import ResponseData

logger = logging.getLogger(__name__)

INCORRECT_EMAIL_OR_PASSWORD = 'incorrect email or password'


def login(payload: Any) -> ResponseData:
    """
    Authenticate a user by e-mail address and password.

    An unknown address, a broken user store and a wrong password all get
    the same response, so that the client cannot tell them apart.

    Returns
    -------
    tuple
        ``{'user': <User>}`` for the route to start a session with,
        ``200 OK``, and no extra headers.

    Raises
    ------
    :class:`.BadRequest`
        The body is malformed.
    :class:`.Unauthorized`
        The credentials are not valid.

    """
    form = load(LoginForm, payload)
    email = form.email.data or ''
    try:
        user = current_repository().find_by_email(email)
    except NotFoundError as e:
        logger.debug('No user with e-mail %s', email)
        raise Unauthorized(INCORRECT_EMAIL_OR_PASSWORD) from e
    except StoreError as e:
        logger.error('User lookup failed: %s', e)
        raise Unauthorized(INCORRECT_EMAIL_OR_PASSWORD) from e

    if not user.compare_password(form.password.data or ''):
        logger.debug('Incorrect password for user %s', user.id)
        raise Unauthorized(INCORRECT_EMAIL_OR_PASSWORD)
    return {'user': user}, HTTPStatus.OK, {}
