# tests/conftest.py

import pytest
from machinery_site import create_app, db
from config import TestingConfig
from tests.helpers import create_test_user, login


@pytest.fixture(scope='function')
def app():
    """
    Function-scoped test Flask application backed by an in-memory database.
    Tables are created by the app factory and dropped after each test.
    """
    app = create_app(TestingConfig)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def client_as(app):
    """
    Returns a factory producing a test client logged in with the given role.
    Each call creates a separate user and client.
    """
    def _client_as(role):
        username = f"fixture_{role}"
        with app.app_context():
            create_test_user(username=username, password="password", role=role)
        role_client = app.test_client()
        login_res = login(role_client, username, "password")
        if login_res.status_code != 302:
            pytest.fail(f"{role} login failed during fixture setup.")
        return role_client
    return _client_as


@pytest.fixture(scope='function')
def admin_client(client_as):
    """Test client already logged in as an admin user."""
    return client_as('admin')


@pytest.fixture(scope='function')
def editor_client(client_as):
    return client_as('editor')


@pytest.fixture(scope='function')
def viewer_client(client_as):
    return client_as('viewer')
