"""
User accounts API.

The accounts API is a Flask application that provides user registration,
password and Telegram based authentication, and session-based access to
private routes.

Users are identified either by an e-mail address (with a password) or by a
Telegram user id. Users are stored in a relational database; an in-memory
repository with the same interface is available for tests and local
development.

When a user authenticates, they are issued a session key in the form of a
signed cookie. The session record lives in a key-value store (Redis), and is
looked up by the authentication gate on every request to a private route.

Every request passes through a small WSGI middleware chain that tags it with
a request id, logs it, and applies permissive CORS headers before it reaches
the Flask application.
"""
