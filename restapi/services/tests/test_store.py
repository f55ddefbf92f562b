"""Tests for :mod:`restapi.services.store`."""

import threading
from unittest import TestCase, mock

from restapi.domain import User
from restapi.exceptions import ConflictError, NotFoundError, StoreError, \
    ValidationError
from restapi.services.store import sqlstore
from restapi.services.store.sqlstore import SQLUserRepository
from restapi.services.store.teststore import MemoryUserRepository


def email_user() -> User:
    return User(email='user@example.org', password='Passw0rd')


def telegram_user() -> User:
    return User(id_telegram=12345678)


class RepositoryContract(object):
    """Behavior shared by every :class:`.UserRepository`."""

    def get_repository(self):
        raise NotImplementedError()

    def setUp(self):
        self.users = self.get_repository()

    def test_empty_store(self):
        """Every lookup fails with :class:`.NotFoundError`."""
        with self.assertRaises(NotFoundError):
            self.users.find(1)
        with self.assertRaises(NotFoundError):
            self.users.find_by_email('user@example.org')
        with self.assertRaises(NotFoundError):
            self.users.find_by_id_telegram(12345678)

    def test_create(self):
        """Creating a user assigns an id and hashes the password."""
        user = email_user()
        self.users.create(user)
        self.assertGreater(user.id, 0)
        self.assertIsNotNone(user.encrypted_password)

    def test_find(self):
        """A created user can be found by id."""
        user = email_user()
        self.users.create(user)
        found = self.users.find(user.id)
        self.assertEqual(found.id, user.id)
        self.assertEqual(found.email, 'user@example.org')

    def test_find_by_email(self):
        """A created user can be found by e-mail address."""
        user = email_user()
        self.users.create(user)
        found = self.users.find_by_email('user@example.org')
        self.assertEqual(found.id, user.id)
        self.assertTrue(found.compare_password('Passw0rd'))
        self.assertFalse(found.compare_password('Passw0rdx'))

    def test_find_by_id_telegram(self):
        """A created user can be found by Telegram id."""
        user = telegram_user()
        self.users.create(user)
        found = self.users.find_by_id_telegram(12345678)
        self.assertEqual(found.id, user.id)
        self.assertIsNone(found.email)
        self.assertIsNone(found.encrypted_password)

    def test_distinct_ids(self):
        """Each user gets their own id."""
        first, second = email_user(), telegram_user()
        self.users.create(first)
        self.users.create(second)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.users.find(second.id).id_telegram, 12345678)

    def test_phone(self):
        """The phone number is stored with the user."""
        for user in (User(email='user@example.org', password='Passw0rd',
                          phone='+15551234567'),
                     User(id_telegram=1, phone='+15551234568')):
            self.users.create(user)
            self.assertEqual(self.users.find(user.id).phone, user.phone)

    def test_invalid_user(self):
        """Invalid users are rejected before they are stored."""
        with self.assertRaises(ValidationError):
            self.users.create(User(password='Passw0rd'))
        with self.assertRaises(NotFoundError):
            self.users.find(1)

    def test_duplicate_email(self):
        """E-mail addresses are unique."""
        self.users.create(email_user())
        with self.assertRaises(ConflictError):
            self.users.create(email_user())

    def test_duplicate_id_telegram(self):
        """Telegram ids are unique."""
        self.users.create(telegram_user())
        with self.assertRaises(ConflictError):
            self.users.create(telegram_user())


class TestMemoryUserRepository(RepositoryContract, TestCase):
    """The in-memory repository."""

    def get_repository(self):
        return MemoryUserRepository()

    def test_ids_follow_size(self):
        """Ids are assigned as the size of the store plus one."""
        for expected in (1, 2, 3):
            user = User(id_telegram=expected)
            self.users.create(user)
            self.assertEqual(user.id, expected)

    def test_plaintext_not_stored(self):
        """The stored user does not keep the plaintext password."""
        user = email_user()
        self.users.create(user)
        self.assertEqual(user.password, 'Passw0rd')
        found = self.users.find(user.id)
        self.assertEqual(found.password, '')
        self.assertTrue(found.compare_password('Passw0rd'))

    def test_lookups_return_copies(self):
        """Changing a returned user does not change the stored one."""
        user = telegram_user()
        self.users.create(user)
        user.phone = '+15551234567'
        found = self.users.find_by_id_telegram(12345678)
        self.assertIsNot(found, user)
        self.assertIsNone(found.phone)
        found.email = 'user@example.org'
        self.assertIsNone(self.users.find(user.id).email)

    def test_concurrent_creates(self):
        """Concurrent creates do not hand out the same id."""
        def create(id_telegram):
            self.users.create(User(id_telegram=id_telegram))

        threads = [threading.Thread(target=create, args=(i,))
                   for i in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        ids = {self.users.find_by_id_telegram(i).id for i in range(20)}
        self.assertEqual(ids, set(range(1, 21)))


class TestSQLUserRepository(RepositoryContract, TestCase):
    """The SQL repository, against an in-memory SQLite database."""

    def get_repository(self):
        repository = SQLUserRepository.from_url('sqlite://')
        repository.create_all()
        return repository

    def tearDown(self):
        self.users.drop_all()

    def test_insert_columns(self):
        """The insert column set depends on Telegram id and phone."""
        self.assertNotIn('phone', sqlstore.INSERT_COLUMNS[(False, False)])
        self.assertIn('phone', sqlstore.INSERT_COLUMNS[(True, True)])
        self.assertIn('id_telegram', sqlstore.INSERT_COLUMNS[(True, False)])
        self.assertNotIn('id_telegram',
                         sqlstore.INSERT_COLUMNS[(False, True)])

    def test_broken_database(self):
        """Backend failures are not mistaken for missing records."""
        self.users.drop_all()
        with self.assertRaises(StoreError):
            self.users.find(1)
        with self.assertRaises(StoreError):
            self.users.create(email_user())
        self.users.create_all()

    @mock.patch(f'{sqlstore.__name__}.SQLUserRepository._find_one')
    def test_lookup_is_keyed(self, mock_find_one):
        """Each lookup filters on its own column."""
        self.users.find_by_email('user@example.org')
        criterion = mock_find_one.call_args[0][0]
        self.assertEqual(criterion.left.name, 'email')
        self.assertEqual(criterion.right.value, 'user@example.org')
