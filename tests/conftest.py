import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def app():
    from main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Test client with a fresh lifespan, so every test starts with empty history."""
    with TestClient(app) as test_client:
        yield test_client
