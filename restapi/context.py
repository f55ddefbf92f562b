"""Per-request context carried through the middleware chain."""

from typing import Optional

from flask import request

from .domain import User

ENVIRON_KEY = 'restapi.context'


class RequestContext(object):
    """
    Data attached to a single request.

    Created by :class:`.middleware.RequestIDMiddleware` and stored in the
    WSGI environ, so that it is visible to every later middleware and to the
    Flask application. ``user`` is set only by the authentication gate.
    """

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        self.user: Optional[User] = None

    def __repr__(self) -> str:
        return f'RequestContext(request_id={self.request_id!r})'


def get_context(environ: dict) -> Optional[RequestContext]:
    """Get the context of a request from its WSGI environ."""
    context: Optional[RequestContext] = environ.get(ENVIRON_KEY)
    return context


def current_context() -> RequestContext:
    """
    Get the context of the request being handled.

    If the application is running without the middleware chain (e.g. in a
    unit test of a single route), a context without a request id is created
    on first access.
    """
    context = get_context(request.environ)
    if context is None:
        context = RequestContext('')
        request.environ[ENVIRON_KEY] = context
    return context
