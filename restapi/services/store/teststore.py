"""User repository that keeps users in memory."""

import threading
from dataclasses import replace
from typing import Callable, Dict

from ...domain import User
from ...exceptions import ConflictError, NotFoundError
from . import UserRepository


class MemoryUserRepository(UserRepository):
    """
    Keeps users in a dict keyed by id.

    Ids are assigned as ``len(users) + 1``. Since users are never removed,
    this yields 1, 2, 3...

    All access to the dict happens under a lock, so a single instance can be
    shared by the worker threads of a development server. The dict holds
    copies without the plaintext password, and lookups return fresh copies.
    """

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._lock = threading.Lock()

    def create(self, user: User) -> None:
        user.validate()
        user.prepare_for_storage()

        with self._lock:
            for existing in self._users.values():
                if user.email is not None and existing.email == user.email:
                    raise ConflictError('user already exists')
                if user.id_telegram is not None \
                        and existing.id_telegram == user.id_telegram:
                    raise ConflictError('user already exists')
            user.id = len(self._users) + 1
            self._users[user.id] = replace(user, password='')

    def find(self, user_id: int) -> User:
        with self._lock:
            try:
                return replace(self._users[user_id])
            except KeyError as e:
                raise NotFoundError() from e

    def find_by_email(self, email: str) -> User:
        return self._find_first(lambda user: user.email == email)

    def find_by_id_telegram(self, id_telegram: int) -> User:
        return self._find_first(lambda user: user.id_telegram == id_telegram)

    def _find_first(self, matches: Callable[[User], bool]) -> User:
        with self._lock:
            for user in self._users.values():
                if matches(user):
                    return replace(user)
        raise NotFoundError()
