"""
Internal service API for the session store.

A session maps an opaque, signed cookie to the id of an authenticated user.
The session record itself lives in Redis under a random session id, and
expires with the key (see ``SESSION_DURATION``). The cookie carries the
session id, the user id and a nonce, signed with ``JWT_SECRET``; all three
must agree with the stored record for the session to be valid.
"""

import logging
import random
import uuid
from datetime import datetime
from typing import Any, NamedTuple, Optional

import jwt
import redis
from flask import Flask, Request, Response, current_app
from pytz import UTC

from ..domain import User

logger = logging.getLogger(__name__)


class SessionCreationFailed(RuntimeError):
    """Failed to create a session in the session store."""


class SessionDeletionFailed(RuntimeError):
    """Failed to delete a session in the session store."""


class SessionStoreUnavailable(RuntimeError):
    """The session store could not be reached."""


class Unauthenticated(RuntimeError):
    """The request does not carry a valid session."""


class MissingToken(Unauthenticated):
    """No session cookie on the request."""


class InvalidToken(Unauthenticated):
    """The session cookie is malformed, forged or does not match."""


class UnknownSession(Unauthenticated):
    """The session does not exist, or has expired from the store."""


class Session(NamedTuple):
    """An authenticated session."""

    session_id: str
    user_id: int
    nonce: str
    start_time: str


def _generate_nonce(length: int = 8) -> str:
    return ''.join([str(random.randint(0, 9)) for i in range(length)])


class SessionStore(object):
    """
    Creates and loads sessions in Redis.

    The Redis client is thread safe, and connections are attached at the time
    a command is executed. This class simply provides a container for
    configuration.
    """

    def __init__(self, r: Any, secret: str, duration: int = 7200,
                 cookie_name: str = 'braendie', secure: bool = False) -> None:
        self.r = r
        self._secret = secret
        self._duration = duration
        self.cookie_name = cookie_name
        self._secure = secure

    def create(self, user: User) -> Session:
        """
        Create a new session for ``user``.

        Raises
        ------
        :class:`SessionCreationFailed`

        """
        session = Session(
            session_id=str(uuid.uuid4()),
            user_id=user.id,
            nonce=_generate_nonce(),
            start_time=datetime.now(tz=UTC).isoformat()
        )
        try:
            self.r.set(session.session_id, self._encode(session._asdict()),
                       ex=self._duration)
        except redis.exceptions.ConnectionError as e:
            raise SessionCreationFailed(f'Connection failed: {e}') from e
        except Exception as e:
            raise SessionCreationFailed(f'Failed to create: {e}') from e
        logger.debug('Created session %s for user %s', session.session_id,
                     user.id)
        return session

    def generate_cookie(self, session: Session) -> str:
        """Generate a cookie value from a :class:`Session`."""
        return self._encode({
            'session_id': session.session_id,
            'user_id': session.user_id,
            'nonce': session.nonce
        })

    def load(self, cookie: str) -> Session:
        """
        Load a session using a session cookie.

        Raises
        ------
        :class:`InvalidToken`
            The cookie is malformed, or does not match the stored session.
        :class:`UnknownSession`
            There is no such session; it may have expired.
        :class:`SessionStoreUnavailable`
            Redis could not be reached.

        """
        cookie_data = self._decode(cookie)
        try:
            session_id = cookie_data['session_id']
            user_id = cookie_data['user_id']
            nonce = cookie_data['nonce']
        except KeyError as e:
            raise InvalidToken('Token payload malformed') from e

        session = self.load_by_id(session_id)
        if session.nonce != nonce or session.user_id != user_id:
            raise InvalidToken('Invalid token; likely a forgery')
        return session

    def load_by_id(self, session_id: str) -> Session:
        """Get a session by its id."""
        try:
            session_jwt = self.r.get(session_id)
        except redis.exceptions.ConnectionError as e:
            raise SessionStoreUnavailable(f'Connection failed: {e}') from e
        if not session_jwt:
            logger.debug('No such session: %s', session_id)
            raise UnknownSession(f'Failed to find session {session_id}')
        if isinstance(session_jwt, bytes):
            session_jwt = session_jwt.decode('ascii')
        try:
            return Session(**self._decode(session_jwt))
        except TypeError as e:
            raise InvalidToken('Stored session is malformed') from e

    def delete(self, cookie: str) -> None:
        """Delete the session referenced by a cookie."""
        session_id = self._decode(cookie).get('session_id')
        if session_id is None:
            raise InvalidToken('Token payload malformed')
        try:
            self.r.delete(session_id)
        except redis.exceptions.ConnectionError as e:
            raise SessionDeletionFailed(f'Connection failed: {e}') from e

    def issue(self, response: Response, user: User) -> Session:
        """Create a session for ``user`` and set its cookie on ``response``."""
        session = self.create(user)
        response.set_cookie(self.cookie_name, self.generate_cookie(session),
                            max_age=self._duration, httponly=True,
                            secure=self._secure, samesite='Lax')
        return session

    def resolve(self, request: Request) -> Session:
        """
        Load the session referenced by the cookie on ``request``.

        Raises
        ------
        :class:`MissingToken`
            The request has no session cookie.

        Other exceptions are as for :meth:`load`.

        """
        cookie = request.cookies.get(self.cookie_name)
        if not cookie:
            raise MissingToken('No session cookie')
        return self.load(cookie)

    def _encode(self, data: dict) -> str:
        return jwt.encode(data, self._secret, algorithm='HS256')

    def _decode(self, token: str) -> dict:
        try:
            data = jwt.decode(token, self._secret, algorithms=['HS256'])
        except jwt.exceptions.InvalidTokenError as e:
            raise InvalidToken('Session token is malformed') from e
        if not isinstance(data, dict):
            raise InvalidToken('Session token is malformed')
        return data

    @classmethod
    def init_app(cls, app: Flask, r: Optional[Any] = None) -> None:
        """Attach a session store to ``app``."""
        config = app.config
        config.setdefault('REDIS_HOST', 'localhost')
        config.setdefault('REDIS_PORT', '6379')
        config.setdefault('REDIS_DATABASE', '0')
        config.setdefault('SESSION_DURATION', '7200')
        config.setdefault('AUTH_SESSION_COOKIE_NAME', 'braendie')
        if r is None:
            r = _get_redis(app)
        app.extensions['restapi.sessions'] = cls(
            r,
            config['JWT_SECRET'],
            duration=int(config['SESSION_DURATION']),
            cookie_name=config['AUTH_SESSION_COOKIE_NAME'],
            secure=bool(config.get('AUTH_SESSION_COOKIE_SECURE'))
        )

    @classmethod
    def current_session(cls) -> 'SessionStore':
        """Get the session store of the current application."""
        store: SessionStore = current_app.extensions['restapi.sessions']
        return store


def _get_redis(app: Flask) -> Any:
    config = app.config
    if config.get('REDIS_FAKE'):
        import fakeredis
        logger.warning('Using fakeredis; sessions are process-local')
        return fakeredis.FakeStrictRedis()
    return redis.StrictRedis(host=config['REDIS_HOST'],
                             port=int(config['REDIS_PORT']),
                             db=int(config['REDIS_DATABASE']))
