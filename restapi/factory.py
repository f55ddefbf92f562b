"""Provides an app factory for the accounts API."""

import logging
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException, InternalServerError

from . import routes
from .app_logging import setup_logger
from .middleware import DEFAULT_MIDDLEWARE, wrap
from .services import store
from .services.sessions import SessionStore
from .services.store import UserRepository

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException) -> Response:
    """Render an HTTP exception as ``{"error": <description>}``."""
    exc_resp = error.get_response()
    response = jsonify(error=error.description)
    response.status_code = exc_resp.status_code
    return response


def handle_unexpected(error: Exception) -> Response:
    """Render an unhandled exception as a JSON 500."""
    if isinstance(error, HTTPException):
        return jsonify_exception(error)
    logger.exception('Unhandled exception: %s', error)
    return jsonify_exception(InternalServerError('internal server error'))


def create_app(config: Optional[Mapping[str, Any]] = None,
               users: Optional[UserRepository] = None,
               redis: Optional[Any] = None) -> Flask:
    """
    Initialize an instance of the accounts API.

    Parameters
    ----------
    config : dict
        Overrides for the parameters in :mod:`restapi.config`.
    users : :class:`.UserRepository`
        Use this repository instead of the one selected by ``USER_STORE``.
    redis : object
        Use this Redis client for the session store.

    """
    app = Flask('restapi')
    app.config.from_pyfile('config.py')
    if config:
        app.config.update(config)

    setup_logger(app.config['LOGLEVEL'])
    store.init_app(app, users)
    SessionStore.init_app(app, redis)

    app.register_blueprint(routes.blueprint)
    app.register_blueprint(routes.private)
    app.register_error_handler(HTTPException, jsonify_exception)
    app.register_error_handler(Exception, handle_unexpected)

    wrap(app, DEFAULT_MIDDLEWARE)
    return app
