"""Applies permissive cross-origin headers."""

from typing import Any, Iterable, List, Tuple

from .base import BaseMiddleware, StartResponse, WSGIRequest

ALLOWED_METHODS = 'GET, HEAD, POST, DELETE, OPTIONS'
ALLOWED_HEADERS = 'Accept, Accept-Language, Content-Language, Content-Type, ' \
    'Origin'


class CORSMiddleware(BaseMiddleware):
    """
    Add CORS headers to every response.

    The allowed origins come from the ``CORS_ALLOWED_ORIGINS`` config
    parameter (default ``*``). Preflight requests are answered here and are
    not passed on to the app.
    """

    @property
    def allowed_origins(self) -> str:
        """Value of the ``Access-Control-Allow-Origin`` header."""
        return str(self.config.get('CORS_ALLOWED_ORIGINS', '*'))

    def before(self, environ: dict,
               start_response: StartResponse) -> WSGIRequest:
        """Decorate ``start_response`` to add the CORS headers."""
        origins = self.allowed_origins

        def _start_response(status: str, headers: List[Tuple[str, str]],
                            *args: Any) -> Any:
            headers = list(headers)
            headers.append(('Access-Control-Allow-Origin', origins))
            return start_response(status, headers, *args)

        return environ, _start_response

    def __call__(self, environ: dict,
                 start_response: StartResponse) -> Iterable:
        environ, start_response = self.before(environ, start_response)
        if _is_preflight(environ):
            start_response('200 OK', [
                ('Access-Control-Allow-Methods', ALLOWED_METHODS),
                ('Access-Control-Allow-Headers', ALLOWED_HEADERS),
                ('Content-Length', '0'),
            ])
            return [b'']
        return self.after(environ, self.app(environ, start_response))


def _is_preflight(environ: dict) -> bool:
    return environ.get('REQUEST_METHOD') == 'OPTIONS' \
        and 'HTTP_ACCESS_CONTROL_REQUEST_METHOD' in environ
