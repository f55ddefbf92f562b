"""Controllers for logging in with a Telegram id."""

import logging
from http import HTTPStatus
from typing import Any

from werkzeug.exceptions import InternalServerError, UnprocessableEntity

from ..domain import User
from ..exceptions import ConflictError, HashError, NotFoundError, \
    StoreError, ValidationError
from ..forms import TelegramCheckForm, load
from ..services.store import current_repository
from . import ResponseData

logger = logging.getLogger(__name__)

CANNOT_CREATE_USER = 'cannot create user'
CANNOT_LOG_IN = 'cannot log in'


def check(payload: Any, next_page: str) -> ResponseData:
    """
    Log in the user with a Telegram id, creating them if needed.

    Parameters
    ----------
    payload : dict
        Decoded JSON body with ``id_telegram``.
    next_page : str
        Where to redirect the user once they are logged in.

    Returns
    -------
    tuple
        ``{'user': <User>}`` for the route to start a session with,
        ``302 Found``, and the ``Location`` header.

    Raises
    ------
    :class:`.BadRequest`
        The body is malformed.
    :class:`.UnprocessableEntity`
        A new user could not be created.
    :class:`.InternalServerError`
        The user store is broken.

    """
    form = load(TelegramCheckForm, payload)
    id_telegram = form.id_telegram.data
    users = current_repository()
    try:
        user = users.find_by_id_telegram(id_telegram)
        logger.debug('Found user %s for Telegram id %s', user.id,
                     id_telegram)
    except NotFoundError:
        user = User(id_telegram=id_telegram)
        try:
            users.create(user)
        except (ValidationError, ConflictError) as e:
            logger.debug('Telegram user rejected: %s', e)
            raise UnprocessableEntity(str(e)) from e
        except (HashError, StoreError) as e:
            logger.error('Could not create Telegram user: %s', e)
            raise UnprocessableEntity(CANNOT_CREATE_USER) from e
        logger.info('Registered user %s for Telegram id %s', user.id,
                    id_telegram)
    except StoreError as e:
        logger.error('User lookup failed: %s', e)
        raise InternalServerError(CANNOT_LOG_IN) from e
    return {'user': user}, HTTPStatus.FOUND, {'Location': next_page}
