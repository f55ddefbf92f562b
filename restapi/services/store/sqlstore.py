"""User repository backed by a relational database."""

import logging
from typing import Any, Dict, Tuple

from sqlalchemy import create_engine, insert, select
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import ColumnElement

from ...domain import User
from ...exceptions import ConflictError, NotFoundError, StoreError
from . import UserRepository
from .models import Base, DBUser

logger = logging.getLogger(__name__)

INSERT_COLUMNS: Dict[Tuple[bool, bool], Tuple[str, ...]] = {
    (False, False): ('email', 'encrypted_password'),
    (False, True): ('email', 'encrypted_password', 'phone'),
    (True, False): ('id_telegram', 'email', 'encrypted_password'),
    (True, True): ('id_telegram', 'email', 'encrypted_password', 'phone'),
}
"""Columns written on insert, keyed by (has Telegram id, has phone)."""

MEMORY_URLS = ('sqlite://', 'sqlite:///:memory:')
"""URLs of private in-memory SQLite databases, which start out empty."""


class SQLUserRepository(UserRepository):
    """
    Stores users in the ``users`` table.

    Every call runs a single statement on a connection checked out from the
    engine's pool. Uniqueness of e-mail addresses and Telegram ids is
    enforced by the database, not here.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> 'SQLUserRepository':
        """Create a repository with a new engine for ``database_url``."""
        params: Dict[str, Any] = {}
        if database_url in MEMORY_URLS:
            # One shared connection, or each checkout gets an empty database.
            params.update(poolclass=StaticPool,
                          connect_args={'check_same_thread': False})
        return cls(create_engine(database_url, **params))

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self._engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self._engine)

    def create(self, user: User) -> None:
        user.validate()
        user.prepare_for_storage()

        key = (user.id_telegram is not None, user.phone is not None)
        values = {column: getattr(user, column)
                  for column in INSERT_COLUMNS[key]}
        try:
            with self._engine.begin() as connection:
                result = connection.execute(insert(DBUser).values(**values))
        except IntegrityError as e:
            logger.debug('Insert rejected by constraint: %s', e)
            raise ConflictError('user already exists') from e
        except SQLAlchemyError as e:
            logger.error('Insert failed: %s', e)
            raise StoreError('could not create user') from e
        user.id = result.inserted_primary_key[0]

    def find(self, user_id: int) -> User:
        return self._find_one(DBUser.id == user_id)

    def find_by_email(self, email: str) -> User:
        return self._find_one(DBUser.email == email)

    def find_by_id_telegram(self, id_telegram: int) -> User:
        return self._find_one(DBUser.id_telegram == id_telegram)

    def _find_one(self, criterion: ColumnElement) -> User:
        query = select(DBUser.id, DBUser.id_telegram, DBUser.email,
                       DBUser.phone, DBUser.encrypted_password) \
            .where(criterion)
        try:
            with self._engine.connect() as connection:
                row = connection.execute(query).first()
        except SQLAlchemyError as e:
            logger.error('Query failed: %s', e)
            raise StoreError('could not query users') from e
        if row is None:
            raise NotFoundError()
        return _to_domain(row)


def _to_domain(row: Row) -> User:
    return User(
        id=row.id,
        id_telegram=row.id_telegram,
        email=row.email,
        phone=row.phone,
        encrypted_password=row.encrypted_password
    )
