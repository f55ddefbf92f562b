"""
Authentication gate for private routes.

:func:`authenticate_user` is registered as a ``before_request`` hook on the
blueprints whose routes require an authenticated user:

.. code-block:: python

   private = Blueprint('private', __name__, url_prefix='/private')
   private.before_request(authenticate_user)

For each request it resolves the session cookie, then loads the user that the
session belongs to, and attaches that user to the request context. Route
functions read it with :func:`current_user`. If either step fails the request
is aborted and the route function is never called:

- no cookie, or an invalid, forged or expired one: 401
- the session's user no longer exists: 401
- the session store or the user store is broken: 500

"""

import logging

from flask import request
from werkzeug.exceptions import InternalServerError, Unauthorized

from .context import current_context
from .domain import User
from .exceptions import NotFoundError, StoreError
from .services.sessions import SessionStore, SessionStoreUnavailable, \
    Unauthenticated
from .services.store import current_repository

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = 'not authenticated'
UNAVAILABLE = 'authentication is unavailable'


def authenticate_user() -> None:
    """Resolve the session and the user, or abort the request."""
    sessions = SessionStore.current_session()
    try:
        session = sessions.resolve(request)
    except Unauthenticated as e:
        logger.debug('No valid session: %s', e)
        raise Unauthorized(NOT_AUTHENTICATED) from e
    except SessionStoreUnavailable as e:
        logger.error('Session store unavailable: %s', e)
        raise InternalServerError(UNAVAILABLE) from e

    try:
        user = current_repository().find(session.user_id)
    except NotFoundError as e:
        logger.debug('Session %s refers to unknown user %s',
                     session.session_id, session.user_id)
        raise Unauthorized(NOT_AUTHENTICATED) from e
    except StoreError as e:
        logger.error('User lookup failed: %s', e)
        raise InternalServerError(UNAVAILABLE) from e

    current_context().user = user


def current_user() -> User:
    """Get the authenticated user of the current request."""
    user = current_context().user
    if user is None:
        raise Unauthorized(NOT_AUTHENTICATED)
    return user
