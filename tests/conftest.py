"""
Shared fixtures: an isolated app per test with its own storage and
avatar directories.
"""

import pytest
from fastapi.testclient import TestClient

from contacts_api.api.app import create_app
from contacts_api.config import Settings

from helpers import bearer, login, register


@pytest.fixture
def settings(tmp_path):
    """Test settings: fast bcrypt, directories under tmp_path, no .env."""
    return Settings(
        _env_file=None,
        secret_key="test-secret",
        bcrypt_rounds=4,
        avatars_dir=str(tmp_path / "public" / "avatars"),
        tmp_dir=str(tmp_path / "tmp"),
        sentry_dsn="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    """Headers for a freshly registered and logged-in user."""
    register(client)
    return bearer(login(client))
