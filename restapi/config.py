"""Flask configuration."""

import os
import secrets

#################### Sessions ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Secret used to sign session cookies and session records."""

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME', 'braendie')
AUTH_SESSION_COOKIE_SECURE = bool(int(
    os.environ.get('AUTH_SESSION_COOKIE_SECURE', '0')))
SESSION_DURATION = os.environ.get('SESSION_DURATION', '86400')
"""Lifetime of a session record in Redis, in seconds."""

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing and development."""


#################### Users ####################
USER_STORE = os.environ.get('USER_STORE', 'sql')
"""Either ``sql`` or ``memory``."""

DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite://')
"""SQLAlchemy URL of the users database."""

CREATE_DB = bool(int(os.environ.get('CREATE_DB', '0')))
"""Create the users table on startup.

Always done for in-memory SQLite, which starts out empty."""


#################### HTTP ####################
DEFAULT_LOGIN_REDIRECT_URL = os.environ.get('DEFAULT_LOGIN_REDIRECT_URL',
                                            '/private/whoami')
"""Where users are sent after logging in with Telegram."""

CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')


#################### Minor configs ##############################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key. Not directly used by the accounts API."""

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
