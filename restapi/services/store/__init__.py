"""
User repositories.

A repository creates users and looks them up by id, e-mail address or
Telegram id. Two implementations share the :class:`UserRepository`
interface:

- :class:`.sqlstore.SQLUserRepository` persists users in a relational
  database.
- :class:`.teststore.MemoryUserRepository` keeps users in a dict, for tests
  and local development.

Which one an application uses is decided by the application factory (see
:func:`init_app`), based on the ``USER_STORE`` config parameter.
"""

from abc import ABC, abstractmethod
from typing import Optional

from flask import Flask, current_app

from ...domain import User


class UserRepository(ABC):
    """Storage for :class:`.User` records."""

    @abstractmethod
    def create(self, user: User) -> None:
        """
        Validate, hash and persist a new user.

        On success ``user.id`` is set to the id assigned by the store.

        Raises
        ------
        :class:`.ValidationError`
        :class:`.HashError`
        :class:`.ConflictError`
            If the e-mail address or Telegram id is already taken.
        :class:`.StoreError`

        """

    @abstractmethod
    def find(self, user_id: int) -> User:
        """Get a user by id, or raise :class:`.NotFoundError`."""

    @abstractmethod
    def find_by_email(self, email: str) -> User:
        """Get a user by e-mail address, or raise :class:`.NotFoundError`."""

    @abstractmethod
    def find_by_id_telegram(self, id_telegram: int) -> User:
        """Get a user by Telegram id, or raise :class:`.NotFoundError`."""


def init_app(app: Flask, repository: Optional[UserRepository] = None) -> None:
    """Attach a user repository to ``app``."""
    if repository is None:
        backend = app.config.get('USER_STORE', 'sql')
        if backend == 'memory':
            from .teststore import MemoryUserRepository
            repository = MemoryUserRepository()
        elif backend == 'sql':
            from .sqlstore import MEMORY_URLS, SQLUserRepository
            database_url = app.config['DATABASE_URL']
            repository = SQLUserRepository.from_url(database_url)
            if app.config.get('CREATE_DB') or database_url in MEMORY_URLS:
                repository.create_all()
        else:
            raise RuntimeError(f'Unknown USER_STORE: {backend}')
    app.extensions['restapi.users'] = repository


def current_repository() -> UserRepository:
    """Get the user repository of the current application."""
    repository: UserRepository = current_app.extensions['restapi.users']
    return repository
