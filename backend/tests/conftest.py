import os
import sys
import time

import pytest

# Ensure the backend root (containing the `impostor` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from impostor import create_app, registry, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'INFO'
    MIN_PLAYERS = 3
    MAX_PLAYERS = 10
    ROOM_CODE_LENGTH = 4
    MAX_NAME_LENGTH = 64
    GAME_DURATION_SEC = 300
    # Short delays so scenario tests see DISCUSSION quickly
    REVEAL_DURATION_SEC = 0.2
    TICK_INTERVAL_SEC = 0.05
    IMPOSTOR_PLACEHOLDER = 'CRITICO'
    WORD_LIST = ['casa', 'cane', 'luna']


@pytest.fixture()
def config_overrides():
    return {}


@pytest.fixture()
def flask_app(config_overrides):
    config_class = type('TestConfig', (TestConfig,), dict(config_overrides))
    application = create_app(config_class)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for extra Socket.IO clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()


@pytest.fixture()
def sio_client(connect):
    return connect()


@pytest.fixture()
def rooms():
    return registry


def payloads(received, name):
    return [pkt['args'][0] if pkt['args'] else {} for pkt in received if pkt['name'] == name]


@pytest.fixture()
def wait_for():
    """Poll a client until an event arrives (background tasks emit it)."""

    def _wait(test_client, name, timeout=3.0, match=None):
        deadline = time.time() + timeout
        while time.time() < deadline:
            found = [p for p in payloads(test_client.get_received(), name) if match is None or p == match]
            if found:
                return found[0]
            time.sleep(0.02)
        raise AssertionError(f'{name} not received within {timeout}s')

    return _wait


@pytest.fixture()
def lobby(connect):
    """Room with Ada (host), Bo and Cy; returns (code, [ada, bo, cy])."""
    ada, bo, cy = connect(), connect(), connect()
    ada.emit('CREATE_ROOM', {'playerName': 'Ada'})
    code = payloads(ada.get_received(), 'ROOM_CREATED')[0]['roomCode']
    for player, name in ((bo, 'Bo'), (cy, 'Cy')):
        player.emit('JOIN_ROOM', {'roomCode': code, 'playerName': name})
    for player in (ada, bo, cy):
        player.get_received()
    return code, [ada, bo, cy]
