"""Tags every request with a unique id."""

import uuid
from typing import Any, List, Tuple

from ..context import ENVIRON_KEY, RequestContext
from .base import BaseMiddleware, StartResponse, WSGIRequest

REQUEST_ID_HEADER = 'X-Request-ID'


class RequestIDMiddleware(BaseMiddleware):
    """
    Generate a request id, and expose it to the app and the client.

    A :class:`.RequestContext` carrying the id is put in the WSGI environ,
    and the id is added to the response headers as ``X-Request-ID``.
    """

    def before(self, environ: dict,
               start_response: StartResponse) -> WSGIRequest:
        """Create the request context and decorate ``start_response``."""
        request_id = str(uuid.uuid4())
        environ[ENVIRON_KEY] = RequestContext(request_id)

        def _start_response(status: str, headers: List[Tuple[str, str]],
                            *args: Any) -> Any:
            headers = [(name, value) for name, value in headers
                       if name.lower() != REQUEST_ID_HEADER.lower()]
            headers.append((REQUEST_ID_HEADER, request_id))
            return start_response(status, headers, *args)

        return environ, _start_response
