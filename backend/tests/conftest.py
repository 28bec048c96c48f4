import os
import sys
import pytest

# Ensure the backend root (containing the `banker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from banker import create_app, socketio
from banker.services import PendingRequestLedger, RoomRegistry, SessionDirectory, TransactionCoordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CLIENT_URL = '*'
    SOCKETIO_NAMESPACE = '/'
    MAX_PLAYERS = 8
    ROOM_CODE_LENGTH = 6
    RECENT_TRANSACTIONS_LIMIT = 50
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def coordinator(flask_app):
    return flask_app.extensions['banker']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; every client is disconnected on teardown."""
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
def bank():
    """A coordinator over fresh stores, without Flask or Socket.IO."""
    registry = RoomRegistry(max_players=8)
    sessions = SessionDirectory(registry)
    ledger = PendingRequestLedger()
    return TransactionCoordinator(registry, sessions, ledger)
