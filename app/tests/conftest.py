"""Shared fixtures for app tests."""
import random

import pytest

from app.notifications import Notifier
from app.remote.mock import MockHealthService
from app.remote.mock_backend import DEMO_EMAIL, DEMO_PASSWORD, MockBackend
from auth.store import SessionStore

TEST_SECRET = "test-secret"


@pytest.fixture
def backend():
    """Seeded backend with cheap bcrypt and deterministic scoring."""
    return MockBackend(secret_key=TEST_SECRET, bcrypt_rounds=4, rng=random.Random(7))


@pytest.fixture
def service(backend):
    return MockHealthService(backend=backend, latency_ms=0)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def store():
    s = SessionStore()
    s.initialize()
    return s


@pytest.fixture
def demo_store(store, backend):
    """Store logged in as the demo account (complete profile)."""
    token, account = backend.login(DEMO_EMAIL, DEMO_PASSWORD)
    store.login(account, token)
    return store
