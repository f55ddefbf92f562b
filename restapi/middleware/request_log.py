"""Logs the start and the completion of every request."""

import logging
import time
from typing import Any, Iterable, List, Tuple

from ..context import get_context
from .base import BaseMiddleware, StartResponse, WSGIRequest

logger = logging.getLogger(__name__)

STARTED_AT = 'restapi.started_at'
STATUS = 'restapi.status'


class RequestLogMiddleware(BaseMiddleware):
    """
    Log each request when it arrives, and again when it has been handled.

    The duration is measured around everything inside this middleware,
    including the Flask app and the route handler.
    """

    def before(self, environ: dict,
               start_response: StartResponse) -> WSGIRequest:
        """Log the start of the request, and capture its response status."""
        method = environ.get('REQUEST_METHOD')
        path = environ.get('PATH_INFO')
        logger.info('started %s %s', method, path,
                    extra=self._fields(environ))
        environ[STARTED_AT] = time.monotonic()
        environ[STATUS] = '200 OK'

        def _start_response(status: str, headers: List[Tuple[str, str]],
                            *args: Any) -> Any:
            environ[STATUS] = status
            return start_response(status, headers, *args)

        return environ, _start_response

    def after(self, environ: dict, response: Iterable) -> Iterable:
        """Log the status and duration of the request."""
        duration = time.monotonic() - environ[STARTED_AT]
        status = environ[STATUS]
        code, _, reason = status.partition(' ')
        logger.info('completed with %s %s in %.3fms', code, reason,
                    duration * 1000,
                    extra=dict(self._fields(environ), status=int(code),
                               duration=duration))
        return response

    def _fields(self, environ: dict) -> dict:
        context = get_context(environ)
        return {
            'remote_addr': environ.get('REMOTE_ADDR'),
            'request_id': context.request_id if context else None,
            'method': environ.get('REQUEST_METHOD'),
            'path': environ.get('PATH_INFO'),
        }
