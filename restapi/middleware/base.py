"""Base class for WSGI middlewares."""

from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

StartResponse = Callable[..., Any]
WSGIRequest = Tuple[dict, StartResponse]


class BaseMiddleware(object):
    """
    A WSGI middleware with ``before`` and ``after`` hooks.

    Subclasses override :meth:`before` to inspect or modify the WSGI environ
    (or to swap in a different ``start_response``), and :meth:`after` to act
    once the wrapped application has returned its response iterable.
    """

    def __init__(self, wsgi_app: Callable,
                 config: Optional[Mapping] = None) -> None:
        self.app = wsgi_app
        self.config = config if config is not None else {}

    def before(self, environ: dict,
               start_response: StartResponse) -> WSGIRequest:
        """Handle the request before it is passed to the wrapped app."""
        return environ, start_response

    def after(self, environ: dict, response: Iterable) -> Iterable:
        """Handle the response returned by the wrapped app."""
        return response

    def __call__(self, environ: dict,
                 start_response: StartResponse) -> Iterable:
        environ, start_response = self.before(environ, start_response)
        response = self.app(environ, start_response)
        return self.after(environ, response)
