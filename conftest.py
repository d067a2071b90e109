"""
Shared fixtures: an in-memory MongoDB (mongomock) wired into the app.
"""
import mongomock
import pytest
from fastapi.testclient import TestClient

from main import app
from skillmatrix.core.config import Settings
from skillmatrix.core.database import Database
from skillmatrix.services.synergy_client import SynergyClient


def offline_settings(**overrides) -> Settings:
    """Settings with the synergy endpoint disabled unless a key is given."""
    config = Settings()
    config.AI_API_KEY = ""
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


@pytest.fixture
def database():
    db = Database(uri="", name="skillmatrix_test", client=mongomock.MongoClient())
    db.ensure_indexes()
    yield db
    db.close()


@pytest.fixture
def client(database):
    app.state.database = database
    app.state.database_error = None
    app.state.synergy_client = SynergyClient(config=offline_settings())
    yield TestClient(app)
    app.state.database = None
    app.state.database_error = None
