import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from simplecards_app import create_app, db
from simplecards_app.core.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    LOG_LEVEL = 'DEBUG'
    LOG_TO_FILE = False
    QUIZLET_RETRY_DELAY = 0
    IMPORT_WORKERS_AUTOSTART = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    app.extensions['simplecards']['import_pools'].shutdown(timeout=5)
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def import_pools(app):
    pools = app.extensions['simplecards']['import_pools']
    pools.start()
    return pools


@pytest.fixture
def register():
    def _register(client, login='alice', password='secret'):
        return client.post('/api/user/register', json={'login': login, 'password': password})
    return _register


@pytest.fixture
def auth_client(client, register):
    """Client with a registered and logged-in user ``alice``."""
    response = register(client)
    assert response.status_code == 200
    client.user_uuid = response.get_json()['data']['uuid']
    return client
