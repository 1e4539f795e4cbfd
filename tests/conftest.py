import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Must be set before the app module reads it at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from cavern import create_app, db  # noqa: E402
from cavern.routes import cavern_api  # noqa: E402


class FixedRandom:
    """Random source stub: ``random()`` always returns ``value``."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


class SequenceRandom:
    """Random source stub replaying ``values`` in order (cycling)."""

    def __init__(self, values):
        self.values = list(values)
        self.index = 0

    def random(self) -> float:
        v = self.values[self.index % len(self.values)]
        self.index += 1
        return v


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def clean_db(test_app):
    """Drop and recreate all tables so ordering assertions see only this test's rows."""
    db.drop_all()
    db.create_all()
    yield


@pytest.fixture(autouse=True)
def _clear_game_store():
    with cavern_api._games_lock:
        cavern_api._games.clear()
    yield


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def sequence_random():
    return SequenceRandom
