import json
import os

# Settings() is built at import time and needs a database URL
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from dhaba_ledger.core.config import Settings
from dhaba_ledger.db.session import Database
from dhaba_ledger.schemas.driver import VisitEvent

TEST_LICENSE = "DL0123456789012"
TEST_LOCATION = "Amrik Sukhdev Dhaba, Murthal"


def visit_payload(**overrides):
    payload = {
        "name": "Ramesh Kumar",
        "mobile_number": "9876543210",
        "license_number": TEST_LICENSE,
        "vehicle_number": "HR26DK8337",
        "vehicle_type": "Truck",
        "last_visited_location": TEST_LOCATION,
    }
    payload.update(overrides)
    return payload


class InMemoryRedisClient:
    """Dict-backed stand-in for RedisClient with the same conditional-set rules."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        value = self.store.get(key)
        return None if value is None else json.loads(value)

    def get_raw(self, key):
        return self.store.get(key)

    def incr(self, key):
        value = int(self.store.get(key) or 0) + 1
        self.store[key] = str(value)
        return value

    def delete(self, key):
        return self.store.pop(key, None) is not None

    def set_if_unchanged(self, watch_key, expected, key, value, expire=3600):
        if (self.store.get(watch_key) or "0") != expected:
            return False
        self.store[key] = json.dumps(value)
        return True


# Fixtures
@pytest.fixture
def database():
    database = Database("sqlite://")
    database.open()
    database.create_all()
    yield database
    database.close()

@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()

@pytest.fixture
def make_visit():
    def _make(**overrides) -> VisitEvent:
        return VisitEvent(**visit_payload(**overrides))
    return _make

@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite://",
        OPERATOR_API_KEY=None,
        ENABLE_REDIS=False,
        ENABLE_CACHING=False,
        RESTRICT_TO_PARTNER_LOCATIONS=False,
    )

@pytest.fixture
def client(test_settings):
    from main import create_app

    with TestClient(create_app(test_settings)) as test_client:
        yield test_client
