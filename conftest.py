import fakeredis
import pytest

from restapi.factory import create_app
from restapi.services.store.teststore import MemoryUserRepository


@pytest.fixture()
def app():
    return create_app({'TESTING': True, 'JWT_SECRET': 'foosecret'},
                      users=MemoryUserRepository(),
                      redis=fakeredis.FakeStrictRedis())


@pytest.fixture()
def client(app):
    return app.test_client()
