"""Controllers for registration."""

import logging
from http import HTTPStatus
from typing import Any

from werkzeug.exceptions import BadRequest, UnprocessableEntity

from ..domain import check_password_strength
from ..exceptions import ConflictError, HashError, StoreError, \
    ValidationError
from ..forms import RegistrationForm, load
from ..services.store import current_repository
from . import ResponseData

logger = logging.getLogger(__name__)

CONFIRM_PASSWORD_REQUIRED = 'confirm password is required'
EASY_PASSWORD = 'password is easy to hack'
CANNOT_CREATE_USER = 'cannot create user'


def register(payload: Any) -> ResponseData:
    """
    Create a user with an e-mail address and a password.

    Parameters
    ----------
    payload : dict
        Decoded JSON body with ``email``, ``password``, ``confirm_password``
        and, optionally, ``phone``.

    Returns
    -------
    tuple
        The sanitized user, ``201 Created``, and no extra headers.

    Raises
    ------
    :class:`.BadRequest`
        The body is malformed, the passwords do not match, or the password
        is too weak.
    :class:`.UnprocessableEntity`
        The user could not be created.

    """
    form = load(RegistrationForm, payload)
    if form.confirm_password.data != form.password.data:
        raise BadRequest(CONFIRM_PASSWORD_REQUIRED)
    if not check_password_strength(form.password.data or ''):
        raise BadRequest(EASY_PASSWORD)

    user = form.to_domain()
    try:
        current_repository().create(user)
    except (ValidationError, ConflictError) as e:
        logger.debug('Registration rejected: %s', e)
        raise UnprocessableEntity(str(e)) from e
    except (HashError, StoreError) as e:
        logger.error('Registration failed: %s', e)
        raise UnprocessableEntity(CANNOT_CREATE_USER) from e
    logger.info('Registered user %s', user.id)

    user.sanitize()
    return user.to_dict(), HTTPStatus.CREATED, {}
