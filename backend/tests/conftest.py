import os
import random
import sys
import pytest

# Ensure the backend root (containing the `rummy` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from rummy import create_app, rooms, socketio
from rummy.registry import RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'
    HOST = '127.0.0.1'
    PORT = 3000


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    rooms.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; all are disconnected afterwards."""
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        if test_client.is_connected():
            test_client.disconnect()


@pytest.fixture()
def registry():
    return RoomRegistry(rng=random.Random(1234))


@pytest.fixture()
def session(registry):
    """A room with both seats taken and the host to play."""
    registry.create_room('R1', 'host', 'Alice')
    return registry.join_room('R1', 'guest', 'Bob')
