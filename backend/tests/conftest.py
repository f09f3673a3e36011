import os
import random
import sys
import pytest

# Ensure the backend root (containing the `mostlikely` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from mostlikely import create_app, get_session, socketio
from mostlikely.services.games import GameRules, GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MIN_PLAYERS = 3
    MAX_PLAYERS = 12
    QUESTIONS_PER_ROUND = 20
    CONTROLLER_DEBOUNCE_MS = 0
    RANDOM_SEED = '1234'


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def app_session(flask_app):
    return get_session()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def session(clock):
    return GameSession(rules=GameRules(), rng=random.Random(7), clock=clock)


def join_players(session, *names):
    """Join each name and return {name: token}."""
    return {name: session.join(name)['token'] for name in names}
