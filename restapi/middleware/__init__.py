"""
WSGI middleware for the accounts API.

Each middleware wraps a WSGI application, and may act on the request (via the
WSGI environ) before the wrapped application is called, and on the response
after it returns. :func:`wrap` composes a list of middlewares around a Flask
application such that the first middleware in the list is the outermost, i.e.
it sees the request first and the response last.

.. code-block:: python

   app = Flask('someapp')
   wrap(app, [RequestIDMiddleware, RequestLogMiddleware, CORSMiddleware])

"""

from typing import Iterable, List, Type

from flask import Flask

from .base import BaseMiddleware
from .cors import CORSMiddleware
from .request_id import RequestIDMiddleware
from .request_log import RequestLogMiddleware

DEFAULT_MIDDLEWARE: List[Type[BaseMiddleware]] = [
    RequestIDMiddleware,
    RequestLogMiddleware,
    CORSMiddleware,
]


def wrap(app: Flask, middlewares: Iterable[Type[BaseMiddleware]]) -> Flask:
    """
    Wrap a Flask app in WSGI middlewares.

    Middlewares are applied in reverse order, so that the first middleware
    in ``middlewares`` handles the request first.

    Parameters
    ----------
    app : :class:`flask.Flask`
    middlewares : list
        Classes that take the WSGI app to wrap and a config mapping.

    Returns
    -------
    :class:`flask.Flask`
        The same app, with ``app.wsgi_app`` replaced by the wrapped app. The
        wrappers are available by name in ``app.middlewares``.

    """
    if not hasattr(app, 'middlewares'):
        app.middlewares = {}      # type: ignore
    for middleware in list(middlewares)[::-1]:
        wrapped = middleware(app.wsgi_app, config=app.config)
        app.wsgi_app = wrapped     # type: ignore
        app.middlewares[middleware.__name__] = wrapped    # type: ignore
    return app
